"""Reading parameter files from different origins.

Supported locations:
- `gs://bucket/path/to/file.json` (Google Cloud Storage)
- `http://...` / `https://...` (plain GET)
- `file:///abs/path` or a bare local path

`LocationReader` picks the backend from the location's scheme.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx
import requests
from google.api_core import exceptions as gcs_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

from adapters.http_client import get_text_sync
from core.config import AppSettings
from core.errors import HttpPaginationError, LoadError
from core.interfaces.storage import ObjectReader

logger = logging.getLogger(__name__)

GCS_PREFIX = "gs://"


def parse_gcs_uri(location: str) -> tuple[str, str]:
    """Split `gs://bucket/path` into `(bucket, path)`.

    The path keeps every `/` after the bucket name.
    """

    if not location.startswith(GCS_PREFIX):
        raise LoadError(f"Not a gs:// location: {location!r}", location=location)
    bucket, sep, blob = location[len(GCS_PREFIX):].partition("/")
    if not bucket or not sep or not blob:
        raise LoadError(
            f"Expected gs://<bucket>/<path>, got {location!r}",
            location=location,
        )
    return bucket, blob


class GCSObjectReader:
    """Reads objects from Google Cloud Storage.

    The storage client is created on first use so that building the reader
    never touches credentials.
    """

    def __init__(self, settings: AppSettings | None = None, client: storage.Client | None = None) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    def _get_client(self) -> storage.Client:
        if self._client is None:
            try:
                self._client = storage.Client(project=self._settings.gcs_project)
            except auth_exceptions.GoogleAuthError as exc:
                raise LoadError(f"Google Cloud credentials not available: {exc}") from exc
        return self._client

    def read_text(self, location: str) -> str:
        bucket_name, blob_name = parse_gcs_uri(location)
        logger.info("Reading gs://%s/%s", bucket_name, blob_name)
        blob = self._get_client().bucket(bucket_name).blob(blob_name)
        try:
            return blob.download_as_text(encoding="utf-8")
        except gcs_exceptions.NotFound as exc:
            raise LoadError(f"Object not found: {location}", location=location) from exc
        except gcs_exceptions.GoogleAPIError as exc:
            raise LoadError(f"Failed to read {location}: {exc}", location=location) from exc
        except auth_exceptions.GoogleAuthError as exc:
            raise LoadError(f"Google Cloud credentials rejected reading {location}: {exc}", location=location) from exc
        except requests.exceptions.RequestException as exc:
            raise LoadError(f"Transport error reading {location}: {exc}", location=location) from exc


class LocalFileReader:
    """Reads UTF-8 files from the local filesystem (`file://` or bare paths)."""

    def read_text(self, location: str) -> str:
        path = _local_path(location)
        logger.info("Reading %s", path)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise LoadError(f"File not found: {path}", location=location) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"Failed to read {path}: {exc}", location=location) from exc


class HttpObjectReader:
    """Downloads a parameter file over HTTP(S)."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def read_text(self, location: str) -> str:
        logger.info("Downloading %s", location)
        try:
            return get_text_sync(location, settings=self._settings, transport=self._transport)
        except HttpPaginationError as exc:
            raise LoadError(f"Failed to download {location}: {exc}", location=location) from exc


class LocationReader:
    """Dispatches to the reader matching the location's scheme."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        gcs: ObjectReader | None = None,
        http: ObjectReader | None = None,
        local: ObjectReader | None = None,
    ) -> None:
        settings = settings or AppSettings()
        self._gcs = gcs or GCSObjectReader(settings)
        self._http = http or HttpObjectReader(settings)
        self._local = local or LocalFileReader()

    def reader_for(self, location: str) -> ObjectReader:
        scheme = urlparse(location).scheme.lower()
        if scheme == "gs":
            return self._gcs
        if scheme in ("http", "https"):
            return self._http
        if scheme in ("", "file") or _looks_like_windows_drive(location):
            return self._local
        raise LoadError(f"Unsupported parameter file location: {location!r}", location=location)

    def read_text(self, location: str) -> str:
        return self.reader_for(location).read_text(location)


def _looks_like_windows_drive(location: str) -> bool:
    return len(location) > 2 and location[1] == ":" and location[0].isalpha() and location[2] in ("\\", "/")


def _local_path(location: str) -> Path:
    if location.startswith("file://"):
        return Path(unquote(urlparse(location).path))
    return Path(location).expanduser()
