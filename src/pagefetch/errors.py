"""Error taxonomy for pagefetch.

Every error raised while fetching or converting a page derives from
PagefetchError. The pipeline turns all of them except
RequestValidationError into a failure outcome carrying ``str(error)``.
"""

from __future__ import annotations


class PagefetchError(Exception):
    """Base class for all pagefetch errors."""


class RequestValidationError(PagefetchError):
    """Malformed URL or out-of-range parameter, raised before any network call."""


class TransportError(PagefetchError):
    """Connection failure, DNS failure, timeout or redirect overflow."""


class HttpStatusError(PagefetchError):
    """Response status code was 400 or above."""

    def __init__(self, status: int, reason: str | None = None) -> None:
        self.status = status
        self.reason = reason or ""
        super().__init__(f"HTTP {status}: {self.reason}")


class NoResponseError(PagefetchError):
    """The request was sent but the server never answered."""

    MESSAGE = "No response received from server"

    def __init__(self, message: str = MESSAGE) -> None:
        super().__init__(message)


class ConversionError(PagefetchError):
    """Unexpected fault while parsing a document or converting it to Markdown."""
