"""Rich UI components for the CLI.

Tables and panels shared by the `run` and `doctor` commands. Values coming
from parameter files or error messages are wrapped in `Text` so Rich never
parses them as markup.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import SourceConfig
from core.services.fetch_pipeline import JobResult


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in quiet mode)."""

    title = Text("HTTP Pagination Source", style="bold cyan")
    subtitle = Text("Parameter fan-out • Paginated GET • JSON Lines", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_config_panel(config: SourceConfig) -> Panel:
    body = Text()
    body.append("Template: ", style="bold")
    body.append(config.url_template + "\n")
    body.append("Parameters: ", style="bold")
    body.append(config.params_file_path + "\n")
    body.append("Pagination: ", style="bold")
    if config.pagination_enabled:
        body.append(f"{config.pagination_param} = 1..{config.max_pages}")
    else:
        body.append("off", style="dim")
    return Panel(body, title="Job", border_style="cyan")


def build_units_table(result: JobResult) -> Table:
    """One row per parameter unit."""

    table = Table(title="Units")
    table.add_column("Parameter", style="cyan", no_wrap=True)
    table.add_column("Records", style="white", justify="right")
    table.add_column("Status", style="green")
    table.add_column("Error", style="red")
    for unit in result.units:
        status = "OK" if unit.ok else "FAILED"
        table.add_row(
            Text(unit.parameter),
            str(len(unit.records)),
            status,
            Text("" if unit.error is None else str(unit.error)),
        )
    return table


def build_summary_text(result: JobResult) -> Text:
    failed = len(result.failed_units)
    style = "green" if failed == 0 else "yellow"
    return Text(
        f"{len(result.parameters)} parameter(s), {result.record_count} record(s), {failed} failed unit(s)",
        style=style,
    )
