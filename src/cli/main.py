"""Main CLI (Typer).

Commands:
- `run`: load the parameter list and fetch every unit, writing JSON Lines.
- `doctor`: environment diagnostics (see `cli.doctor`).
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.json_exporter import JsonlWriter, open_jsonl_output
from cli import doctor
from cli.ui_components import build_config_panel, build_summary_text, build_units_table, print_banner
from core.config import AppSettings, SourceConfig, build_source_config, load_source_config
from core.errors import ConfigurationError, LoadError
from core.log import configure_logging
from core.services.fetch_pipeline import JobHooks, run_job

app = typer.Typer(
    no_args_is_help=True,
    help="Fetch a parameterized set of HTTP endpoints, optionally paginated.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console(stderr=True)

EXIT_UNIT_FAILED = 1
EXIT_BAD_INPUT = 2


def _resolve_config(
    *,
    config_path: Path | None,
    url_template: str | None,
    params: str | None,
    pagination_param: str | None,
    max_pages: int | None,
) -> SourceConfig:
    if config_path is not None:
        base = load_source_config(config_path)
        overrides = {
            "url_template": url_template,
            "params_file_path": params,
            "pagination_param": pagination_param,
            "max_pages": max_pages,
        }
        merged = base.model_dump()
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return build_source_config(**merged)

    if not url_template or not params:
        raise ConfigurationError("--url-template and --params are required (or pass --config)")
    return build_source_config(
        url_template=url_template,
        params_file_path=params,
        pagination_param=pagination_param,
        max_pages=max_pages,
    )


@app.command(name="run")
def run_command(
    url_template: Optional[str] = typer.Option(
        None, "--url-template", "-u", help="URL with a ${param} placeholder."
    ),
    params: Optional[str] = typer.Option(
        None, "--params", "-p", help="Parameter file: gs://bucket/file.json, https://..., or a local path."
    ),
    pagination_param: Optional[str] = typer.Option(
        None, "--pagination-param", help="Query parameter used for the page number (e.g. page)."
    ),
    max_pages: Optional[int] = typer.Option(
        None, "--max-pages", min=1, help="Pages fetched per parameter when paginating."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="JSON file holding the job configuration."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write JSON Lines here instead of stdout."
    ),
    max_concurrency: Optional[int] = typer.Option(
        None, "--max-concurrency", min=1, max=256, help="Parameter units fetched at once."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ..."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner or summary table."),
) -> None:
    """Load the parameter list and fetch every endpoint."""

    settings = AppSettings()
    if max_concurrency is not None:
        settings = settings.model_copy(update={"max_concurrency": max_concurrency})
    configure_logging(log_level or settings.log_level, console=_console)

    try:
        config = _resolve_config(
            config_path=config_path,
            url_template=url_template,
            params=params,
            pagination_param=pagination_param,
            max_pages=max_pages,
        )
    except ConfigurationError as exc:
        _console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_BAD_INPUT) from exc

    if not quiet:
        print_banner(_console)
        _console.print(build_config_panel(config))

    out_fh = open_jsonl_output(output) if output is not None else sys.stdout
    try:
        writer = JsonlWriter(out_fh)
        result = asyncio.run(run_job(config, settings=settings, hooks=JobHooks(record=writer)))
    except LoadError as exc:
        _console.print(f"[red]Could not load parameters:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_BAD_INPUT) from exc
    finally:
        if output is not None:
            out_fh.close()

    if not quiet:
        if result.units:
            _console.print(build_units_table(result))
        _console.print(build_summary_text(result))
        if output is not None:
            _console.print(f"[green]Wrote {writer.count} record(s) to:[/green] {escape(str(output))}")

    if not result.ok:
        raise typer.Exit(code=EXIT_UNIT_FAILED)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
