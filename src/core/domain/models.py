"""Domain models (Pydantic v2).

These models describe *what* a fetch produces, not *how* it is fetched.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class OutputRecord(BaseModel):
    """One fetched page: the raw response body as text.

    No schema is imposed on the body; downstream consumers parse it.
    """

    model_config = ConfigDict(frozen=True)

    response: str = Field(
        ...,
        description="Raw response body, decoded as text.",
    )


class FetchRequest(BaseModel):
    """A fully resolved URL for one parameter (and page, when paginating)."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1)
    parameter: str
    page: int | None = Field(
        default=None,
        ge=1,
        description="1-based page number, `None` when pagination is disabled.",
    )


class EmittedRecord(BaseModel):
    """An `OutputRecord` plus the provenance used by exporters."""

    model_config = ConfigDict(frozen=True)

    parameter: str
    page: int | None = None
    url: str
    record: OutputRecord

    def to_json_row(self) -> dict[str, object]:
        return {
            "parameter": self.parameter,
            "page": self.page,
            "response": self.record.response,
        }
