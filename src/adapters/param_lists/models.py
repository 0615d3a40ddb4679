"""Parameter file model.

The file is a flat list of strings; order is kept but carries no meaning.
"""

from __future__ import annotations

from pydantic import RootModel, StrictStr


class ParameterList(RootModel[list[StrictStr]]):
    """Top-level JSON array of strings (`["a", "b"]`)."""

    def __iter__(self):  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)
