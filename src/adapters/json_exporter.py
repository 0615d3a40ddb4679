"""JSON Lines export of fetched records.

One JSON object per line: `{"page": ..., "parameter": ..., "response": ...}`.
Records are written as they arrive so partially failed units keep the pages
already fetched.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO

from core.domain.models import EmittedRecord


def record_to_jsonl(record: EmittedRecord) -> str:
    return json.dumps(record.to_json_row(), ensure_ascii=False, sort_keys=True)


class JsonlWriter:
    """Incremental JSONL sink; usable as a `JobHooks.record` callback."""

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self.count = 0

    def __call__(self, record: EmittedRecord) -> None:
        self._stream.write(record_to_jsonl(record) + "\n")
        self._stream.flush()
        self.count += 1


def open_jsonl_output(output_path: Path) -> IO[str]:
    """Open `output_path` for UTF-8 JSON Lines, creating parent directories."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path.open("w", encoding="utf-8")
