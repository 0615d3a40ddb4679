"""Logging setup (stdlib logging + Rich handler)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "INFO", *, console: Console | None = None) -> None:
    """Install a single `RichHandler` on the root logger.

    Logs go to stderr so that records printed to stdout stay machine-readable.
    Calling it again replaces the previous handler.
    """

    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(numeric)

    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if numeric <= logging.DEBUG else logging.WARNING)
