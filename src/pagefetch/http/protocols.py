"""Protocol definitions for HTTP client abstraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by HttpClient.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        reason: Status text sent by the server ("OK", "Not Found", ...)
        headers: All response headers
        url: Final URL after any redirects
    """

    status_code: int
    content: bytes
    content_type: str = ""
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""


class HttpClient(Protocol):
    """
    Protocol for HTTP clients.

    Implementations return a response for every status code; deciding
    whether a status is a failure is left to the caller. Network-level
    problems are raised as pagefetch.errors.TransportError or
    pagefetch.errors.NoResponseError.
    """

    async def get(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP GET request.

        Args:
            url: The URL to fetch
            timeout: Request timeout in seconds
            headers: Optional additional headers

        Returns:
            HttpResponse with status, content, and headers
        """
        ...

    def decode_content(self, response: HttpResponse) -> str:
        """Decode response content to a string."""
        ...
