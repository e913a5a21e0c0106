"""Request model for a single page fetch."""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import RequestValidationError

ALLOWED_SCHEMES = frozenset({"http", "https"})


def validate_url(url: str) -> str:
    """
    Check that a URL is an absolute http(s) URI.

    Args:
        url: The URL to check

    Returns:
        The URL, stripped of surrounding whitespace

    Raises:
        ValueError: If the URL cannot be fetched
    """
    url = url.strip()
    try:
        parsed = urlparse(url)
        # Accessing .port validates the port component
        parsed.port
    except ValueError as e:
        raise ValueError(f"Invalid URL format: {url!r}") from e

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' not allowed in {url!r} (allowed: http, https)")
    if not parsed.hostname:
        raise ValueError(f"URL has no domain: {url!r}")
    if any(ch.isspace() for ch in url):
        raise ValueError(f"URL contains whitespace: {url!r}")
    return url


class FetchRequest(BaseModel):
    """
    One fetch invocation.

    Example:
        request = FetchRequest(url="https://example.com/a", include_metadata=True)
    """

    url: str = Field(..., description="The URL to fetch and convert to markdown")
    include_metadata: bool = Field(False, description="Include page metadata (title, author, etc.)")
    simplify: bool = Field(True, description="Extract main readable content only")
    timeout_ms: int = Field(30000, gt=0, description="Request timeout in milliseconds")

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return validate_url(value)

    @property
    def timeout_seconds(self) -> float:
        """Timeout converted for the HTTP client."""
        return self.timeout_ms / 1000

    @classmethod
    def build(cls, **fields: object) -> FetchRequest:
        """
        Construct a request, reporting problems as RequestValidationError.

        Raises:
            RequestValidationError: If any field is invalid
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            details = "; ".join(_format_error(err) for err in e.errors())
            raise RequestValidationError(details) from e


def _format_error(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()))
    message = str(err.get("msg", "invalid value"))
    # pydantic prefixes errors raised from validators
    message = message.removeprefix("Value error, ")
    return f"{location}: {message}" if location else message
