"""Contract for reading remote objects.

`ObjectReader` is structural (Protocol): the GCS adapter, the local-file
reader and test fakes satisfy it without sharing a base class.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectReader(Protocol):
    """Reads a whole object as text.

    Rules:
    - `read_text` is blocking; it is called once per job, before fan-out.
    - Missing objects or I/O failures raise `core.errors.LoadError`.
    """

    def read_text(self, location: str) -> str:
        """Return the full content stored at `location`."""

        ...
