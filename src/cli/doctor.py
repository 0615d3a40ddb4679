"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from adapters.http_client import build_async_client
from adapters.object_storage import LocationReader
from adapters.param_lists import load_parameters
from core.config import AppSettings, write_user_env_vars
from core.errors import LoadError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_params(location: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        params = load_parameters(location, LocationReader(settings))
    except LoadError as exc:
        return False, str(exc)
    return True, f"{len(params)} parameter(s)"


@app.command()
def run(
    url: str = typer.Option("https://www.google.com", "--url", help="Endpoint used for the connectivity check."),
    params: Optional[str] = typer.Option(None, "--params", help="Also check that this parameter file loads."),
) -> None:
    """Run baseline diagnostics."""

    settings = AppSettings()

    table = Table(title="HTTP Pagination Source Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("User-Agent", "OK", settings.user_agent)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds}s")
    table.add_row("Max concurrency", "OK", str(settings.max_concurrency))
    gcs_status = "OK" if settings.gcs_project else "DEFAULT"
    table.add_row("GCS project", gcs_status, Text(settings.gcs_project or "ambient credentials"))

    ok_http, detail_http = asyncio.run(_check_http(url, settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", Text(detail_http))

    ok_params = True
    if params:
        ok_params, detail_params = _check_params(params, settings)
        table.add_row("Parameter file", "OK" if ok_params else "FAIL", Text(detail_params))

    _console.print(table)

    if not (ok_http and ok_params):
        raise typer.Exit(code=1)


@app.command()
def configure(
    max_concurrency: Optional[int] = typer.Option(None, "--max-concurrency", min=1, max=256),
    gcs_project: Optional[str] = typer.Option(None, "--gcs-project"),
    http_timeout: Optional[float] = typer.Option(None, "--http-timeout", min=0.1),
) -> None:
    """Store settings in the user config .env."""

    values = {
        "HTTP_PAGINATION_MAX_CONCURRENCY": None if max_concurrency is None else str(max_concurrency),
        "HTTP_PAGINATION_GCS_PROJECT": gcs_project,
        "HTTP_PAGINATION_HTTP_TIMEOUT_SECONDS": None if http_timeout is None else str(http_timeout),
    }
    if all(v is None for v in values.values()):
        raise typer.BadParameter("pass at least one setting to store")

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {escape(str(env_path))}")
