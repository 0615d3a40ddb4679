"""Parameter list loading.

Formats:
- JSON: a top-level array of strings (default).
- CSV:  one parameter per row, first column; blank rows are skipped.

The format is picked from the location's extension. Loading is fail-fast:
any problem raises before a single URL is fetched.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from enum import Enum
from urllib.parse import urlparse

from pydantic import ValidationError

from adapters.param_lists.models import ParameterList
from core.errors import LoadError, ParseError
from core.interfaces.storage import ObjectReader

logger = logging.getLogger(__name__)


class ParamFormat(str, Enum):
    JSON = "json"
    CSV = "csv"

    @classmethod
    def from_location(cls, location: str) -> "ParamFormat":
        path = urlparse(location).path or location
        if path.lower().endswith(".csv"):
            return cls.CSV
        return cls.JSON


def parse_json_parameters(text: str, *, location: str | None = None) -> list[str]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Parameter file is not valid JSON: {exc}", location=location) from exc
    if not isinstance(data, list):
        raise ParseError(
            f"Parameter file must hold a JSON array, got {type(data).__name__}",
            location=location,
        )
    try:
        return list(ParameterList.model_validate(data))
    except ValidationError as exc:
        bad = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise ParseError(
            f"Parameter file must only contain strings (bad index: {bad})",
            location=location,
        ) from exc


def parse_csv_parameters(text: str, *, location: str | None = None) -> list[str]:
    try:
        rows = list(csv.reader(io.StringIO(text)))
    except csv.Error as exc:
        raise ParseError(f"Parameter file is not valid CSV: {exc}", location=location) from exc
    return [row[0] for row in rows if row]


def parse_parameters(text: str, fmt: ParamFormat = ParamFormat.JSON, *, location: str | None = None) -> list[str]:
    if fmt is ParamFormat.CSV:
        return parse_csv_parameters(text, location=location)
    return parse_json_parameters(text, location=location)


def load_parameters(location: str, reader: ObjectReader, fmt: ParamFormat | None = None) -> list[str]:
    """Read `location` once and return its parameters in file order."""

    if not location or not location.strip():
        raise LoadError("Parameter file location is empty")
    fmt = fmt or ParamFormat.from_location(location)
    text = reader.read_text(location)
    params = parse_parameters(text, fmt, location=location)
    logger.info("Loaded %d parameter(s) from %s", len(params), location)
    return params
