"""Tool command handlers: request validation, fetching and MCP result shaping."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from mcp.types import CallToolResult, TextContent

from .core import Fetcher, render_batch_report
from .errors import RequestValidationError
from .models.request import FetchRequest
from .models.results import FetchSuccess

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    """Wrap text in a single-item tool result."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


async def fetch_url_command(
    fetcher: Fetcher,
    url: str,
    include_metadata: bool = False,
    simplify: bool = True,
    timeout_ms: int = 30000,
) -> CallToolResult:
    """
    Handle the ``fetch_url`` tool.

    Args:
        fetcher: Entered Fetcher
        url: URL to fetch
        include_metadata: Prepend front matter
        simplify: Run main-content extraction
        timeout_ms: Request timeout in milliseconds

    Returns:
        The Markdown document, or an error result naming the URL
    """
    try:
        request = FetchRequest.build(
            url=url,
            include_metadata=include_metadata,
            simplify=simplify,
            timeout_ms=timeout_ms,
        )
    except RequestValidationError as e:
        logger.info(f"Rejected fetch_url arguments: {e}")
        return text_result(f"Invalid arguments: {e}", is_error=True)

    outcome = await fetcher.fetch(request)
    if not isinstance(outcome, FetchSuccess):
        return text_result(f"Error fetching {url}: {outcome.message}", is_error=True)
    if not outcome.text:
        logger.info(f"No content converted from {url}")
        return text_result(f"Error fetching {url}: {UNKNOWN_ERROR}", is_error=True)
    return text_result(outcome.text)


async def fetch_urls_command(
    fetcher: Fetcher,
    urls: Sequence[str],
    include_metadata: bool = False,
    simplify: bool = True,
    timeout_ms: int = 30000,
) -> CallToolResult:
    """
    Handle the ``fetch_urls`` tool.

    Per-URL failures are reported inside the batch report; the result
    itself is only an error when the arguments are invalid.
    """
    try:
        batch = await fetcher.fetch_many(
            urls,
            include_metadata=include_metadata,
            simplify=simplify,
            timeout_ms=timeout_ms,
        )
    except RequestValidationError as e:
        logger.info(f"Rejected fetch_urls arguments: {e}")
        return text_result(f"Invalid arguments: {e}", is_error=True)

    return text_result(render_batch_report(batch))
