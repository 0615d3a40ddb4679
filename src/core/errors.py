"""Error taxonomy for fetch jobs.

Layers:
- `ConfigurationError` and `LoadError` are fatal for the whole job: they are
  raised before any parameter unit is dispatched.
- `NetworkError` / `HttpStatusError` are local to one parameter unit (and,
  with pagination, to the page that failed).
"""

from __future__ import annotations


class HttpPaginationError(Exception):
    """Base class for every error raised by the package."""


class ConfigurationError(HttpPaginationError):
    """A required setting is missing or invalid."""


class LoadError(HttpPaginationError):
    """The parameter file could not be read."""

    def __init__(self, message: str, *, location: str | None = None) -> None:
        super().__init__(message)
        self.location = location


class ParseError(LoadError):
    """The parameter file was read but its content is not a list of strings."""


class NetworkError(HttpPaginationError):
    """Connecting to, or reading from, an endpoint failed."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class HttpStatusError(NetworkError):
    """The endpoint answered with a non-2xx status."""

    def __init__(self, *, url: str, status_code: int) -> None:
        super().__init__(f"HTTP {status_code} for {url}", url=url)
        self.status_code = status_code
