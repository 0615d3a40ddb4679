"""
Tests for cli/ui_components.py

Parameters and error messages are arbitrary text and must render literally.
"""
from __future__ import annotations

import io

from rich.console import Console

from cli.ui_components import build_config_panel, build_units_table
from core.config import build_source_config
from core.errors import HttpStatusError
from core.services.fetch_pipeline import JobResult, UnitResult


def _render(renderable) -> str:
    console = Console(file=io.StringIO(), width=200, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def test_units_table_renders_brackets_literally():
    units = [
        UnitResult(parameter="a[/b]"),
        UnitResult(
            parameter="[bold]x",
            error=HttpStatusError(url="https://api.example.com/?id=[bold]x", status_code=500),
        ),
    ]
    output = _render(build_units_table(JobResult(parameters=["a[/b]", "[bold]x"], units=units)))
    assert "a[/b]" in output
    assert "[bold]x" in output
    assert "FAILED" in output


def test_config_panel_renders_brackets_literally():
    config = build_source_config(
        url_template="https://api.example.com/[v1]?id=${param}",
        params_file_path="gs://bucket/[red]params.json",
    )
    output = _render(build_config_panel(config))
    assert "[v1]" in output
    assert "[red]params.json" in output
