"""Core configuration.

Two kinds of configuration live here:
- `AppSettings`: runtime knobs read from env vars / `.env` files
  (pydantic-settings). They belong to the process, not to a job.
- `SourceConfig`: the immutable description of one fetch job (URL template,
  parameter file, pagination). It is built once at submission time.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError

PARAM_PLACEHOLDER = "${param}"
DEFAULT_USER_AGENT = "Mozilla/5.0"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "http-pagination-source"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "http-pagination-source"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "http-pagination-source"
    return Path.home() / ".config" / "http-pagination-source"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global `.env`.

    `None` values are ignored; existing keys not mentioned are kept.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# http-pagination-source user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Runtime settings shared by the CLI and the adapters."""

    model_config = SettingsConfigDict(
        env_prefix="HTTP_PAGINATION_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=256,
        description="How many parameter units are fetched at the same time.",
    )
    log_level: str = Field(
        default="INFO",
        min_length=1,
        description="Root log level (DEBUG, INFO, WARNING, ...).",
    )
    gcs_project: str | None = Field(
        default=None,
        description="GCP project for the storage client (defaults to the ambient one).",
    )

    @property
    def user_agent(self) -> str:
        return DEFAULT_USER_AGENT


class SourceConfig(BaseModel):
    """Immutable description of a fetch job.

    Pagination is enabled only when both `pagination_param` and `max_pages`
    are present; one without the other leaves it disabled.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    url_template: str = Field(
        ...,
        min_length=1,
        alias="apiTemplate",
        description="URL with a `${param}` placeholder, e.g. https://api.com/data?id=${param}",
    )
    params_file_path: str = Field(
        ...,
        min_length=1,
        alias="paramsFilePath",
        description="Location of the parameter list (gs://, http(s)://, file:// or a local path).",
    )
    pagination_param: str | None = Field(
        default=None,
        alias="paginationParam",
        description="Name of the page query parameter (e.g. `page`).",
    )
    max_pages: int | None = Field(
        default=None,
        ge=1,
        alias="maxPages",
        description="Pages fetched per parameter when pagination is enabled.",
    )

    @field_validator("url_template")
    @classmethod
    def _template_has_placeholder(cls, value: str) -> str:
        if PARAM_PLACEHOLDER not in value:
            raise ValueError(f"must contain the {PARAM_PLACEHOLDER} placeholder")
        return value

    @field_validator("pagination_param")
    @classmethod
    def _blank_pagination_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def pagination_enabled(self) -> bool:
        return self.pagination_param is not None and self.max_pages is not None and self.max_pages >= 1


def build_source_config(**values: object) -> SourceConfig:
    """Build a `SourceConfig`, turning validation failures into `ConfigurationError`."""

    try:
        return SourceConfig(**values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid source configuration: {problems}") from exc


def load_source_config(path: Path) -> SourceConfig:
    """Load a `SourceConfig` from a JSON file (snake_case or camelCase keys)."""

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must hold a JSON object")
    return build_source_config(**data)
