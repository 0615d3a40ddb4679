"""Parameter fan-out and fixed-count pagination.

Flow:
1. `load_parameters` reads the parameter list once (fail-fast).
2. Each parameter becomes an independent unit handled by
   `PaginatedFetcher`, which requests pages 1..max_pages strictly in order.
3. Units run concurrently (bounded by `AppSettings.max_concurrency`); a failing
   unit stops its own remaining pages but never its siblings.

Records are handed to `JobHooks.record` as soon as each page is read, so pages
fetched before a failure remain emitted.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Callable, Iterator, Sequence

import httpx

from adapters.http_client import get_text
from adapters.object_storage import LocationReader
from adapters.param_lists import load_parameters
from core.config import PARAM_PLACEHOLDER, AppSettings, SourceConfig
from core.domain.models import EmittedRecord, FetchRequest, OutputRecord
from core.errors import HttpPaginationError
from core.interfaces.storage import ObjectReader

logger = logging.getLogger(__name__)


def resolve_url(url_template: str, parameter: str) -> str:
    """Substitute `parameter` for every `${param}` token (raw, no encoding)."""

    return url_template.replace(PARAM_PLACEHOLDER, parameter)


def page_url(base_url: str, pagination_param: str, page: int) -> str:
    return f"{base_url}&{pagination_param}={page}"


def build_requests(parameter: str, config: SourceConfig) -> Iterator[FetchRequest]:
    """Yield the requests for one parameter, in page order."""

    base_url = resolve_url(config.url_template, parameter)
    pagination_param, max_pages = config.pagination_param, config.max_pages
    if pagination_param is None or max_pages is None:
        yield FetchRequest(url=base_url, parameter=parameter)
        return

    for page in range(1, max_pages + 1):
        yield FetchRequest(
            url=page_url(base_url, pagination_param, page),
            parameter=parameter,
            page=page,
        )


class PaginatedFetcher:
    """Fetches every page of one parameter, one request at a time.

    Stateless between calls: the same instance can serve many units
    concurrently.
    """

    def __init__(
        self,
        config: SourceConfig,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._settings = settings or AppSettings()
        self._transport = transport

    async def fetch(self, request: FetchRequest) -> OutputRecord:
        body = await get_text(request.url, settings=self._settings, transport=self._transport)
        return OutputRecord(response=body)

    async def iter_pages(self, parameter: str) -> AsyncIterator[tuple[FetchRequest, OutputRecord]]:
        """Yield `(request, record)` pairs; the first failure propagates."""

        for request in build_requests(parameter, self._config):
            record = await self.fetch(request)
            yield request, record

    async def process(self, parameter: str) -> AsyncIterator[OutputRecord]:
        """Yield one `OutputRecord` per page for `parameter`."""

        async for _request, record in self.iter_pages(parameter):
            yield record


@dataclass
class JobHooks:
    """Optional callbacks for UI/export layers."""

    record: Callable[[EmittedRecord], None] | None = None
    unit_failed: Callable[[str, HttpPaginationError], None] | None = None
    unit_done: Callable[["UnitResult"], None] | None = None


@dataclass
class UnitResult:
    """Outcome of one parameter unit."""

    parameter: str
    records: list[EmittedRecord] = field(default_factory=list)
    error: HttpPaginationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class JobResult:
    """All units of a job, in parameter-file order."""

    parameters: list[str]
    units: list[UnitResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(unit.ok for unit in self.units)

    @property
    def failed_units(self) -> list[UnitResult]:
        return [unit for unit in self.units if not unit.ok]

    @property
    def record_count(self) -> int:
        return sum(len(unit.records) for unit in self.units)


async def run_unit(
    fetcher: PaginatedFetcher,
    parameter: str,
    *,
    hooks: JobHooks | None = None,
) -> UnitResult:
    """Run one parameter unit, emitting each page as soon as it is read."""

    hooks = hooks or JobHooks()
    result = UnitResult(parameter=parameter)
    try:
        async for request, record in fetcher.iter_pages(parameter):
            emitted = EmittedRecord(
                parameter=parameter,
                page=request.page,
                url=request.url,
                record=record,
            )
            result.records.append(emitted)
            if hooks.record:
                hooks.record(emitted)
    except HttpPaginationError as exc:
        logger.warning("Unit %r failed after %d page(s): %s", parameter, len(result.records), exc)
        result.error = exc
        if hooks.unit_failed:
            hooks.unit_failed(parameter, exc)
    if hooks.unit_done:
        hooks.unit_done(result)
    return result


async def run_units(
    fetcher: PaginatedFetcher,
    parameters: Sequence[str],
    *,
    max_concurrency: int,
    hooks: JobHooks | None = None,
) -> list[UnitResult]:
    """Fan `parameters` out across tasks, at most `max_concurrency` at once."""

    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def bounded(parameter: str) -> UnitResult:
        async with semaphore:
            return await run_unit(fetcher, parameter, hooks=hooks)

    tasks = [bounded(parameter) for parameter in parameters]
    return list(await asyncio.gather(*tasks))


async def run_job(
    config: SourceConfig,
    *,
    settings: AppSettings | None = None,
    hooks: JobHooks | None = None,
    reader: ObjectReader | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> JobResult:
    """Load the parameter list, then fetch every unit.

    `LoadError` propagates before any request is made.
    """

    settings = settings or AppSettings()
    reader = reader or LocationReader(settings)

    parameters = load_parameters(config.params_file_path, reader)
    result = JobResult(parameters=parameters)
    if not parameters:
        logger.info("Parameter list is empty; nothing to fetch")
        return result

    fetcher = PaginatedFetcher(config, settings, transport=transport)
    logger.info(
        "Fetching %d unit(s), pagination %s, concurrency %d",
        len(parameters),
        f"{config.pagination_param} x{config.max_pages}" if config.pagination_enabled else "off",
        settings.max_concurrency,
    )
    result.units = await run_units(
        fetcher,
        parameters,
        max_concurrency=settings.max_concurrency,
        hooks=hooks,
    )
    logger.info(
        "Job finished: %d record(s), %d failed unit(s)",
        result.record_count,
        len(result.failed_units),
    )
    return result
