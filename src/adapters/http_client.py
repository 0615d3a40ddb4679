"""httpx wrapper.

Standardises timeout and headers for every outgoing request and translates
httpx failures into the package's error taxonomy.
"""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings
from core.errors import HttpStatusError, NetworkError

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` that only sends the fixed User-Agent.

    `transport` lets tests plug an `httpx.MockTransport`.
    """

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Blocking twin of `build_async_client` (parameter files, doctor checks)."""

    settings = settings or AppSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def _checked_text(response: httpx.Response, url: str) -> str:
    if not response.is_success:
        raise HttpStatusError(url=url, status_code=response.status_code)
    return response.text


async def get_text(
    url: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """GET `url` on a fresh connection and return the whole body as text.

    The client (and its connection) is closed on every exit path.
    Raises `HttpStatusError` on non-2xx and `NetworkError` on transport failures.
    """

    logger.debug("GET %s", url)
    try:
        async with build_async_client(settings, transport=transport) as client:
            response = await client.get(url)
    except httpx.InvalidURL as exc:
        raise NetworkError(f"Invalid URL {url!r}: {exc}", url=url) from exc
    except httpx.HTTPError as exc:
        raise NetworkError(f"Request to {url} failed: {exc}", url=url) from exc
    return _checked_text(response, url)


def get_text_sync(
    url: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Blocking variant of `get_text`."""

    logger.debug("GET %s", url)
    try:
        with build_client(settings, transport=transport) as client:
            response = client.get(url)
    except httpx.InvalidURL as exc:
        raise NetworkError(f"Invalid URL {url!r}: {exc}", url=url) from exc
    except httpx.HTTPError as exc:
        raise NetworkError(f"Request to {url} failed: {exc}", url=url) from exc
    return _checked_text(response, url)
