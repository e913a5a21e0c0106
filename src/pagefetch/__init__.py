"""
pagefetch - Fetch web pages and convert them to clean markdown.

Usage:
    from pagefetch import Fetcher, FetchRequest, PagefetchConfig

    async with Fetcher(PagefetchConfig()) as fetcher:
        outcome = await fetcher.fetch(
            FetchRequest(url="https://example.com", include_metadata=True)
        )
        print(outcome.text if outcome.ok else outcome.message)

Run ``pagefetch --serve`` to expose the fetch_url and fetch_urls MCP tools.
"""

__version__ = "1.0.0"

from .core import Fetcher, fetch_blocking, render_batch_report
from .errors import (
    ConversionError,
    HttpStatusError,
    NoResponseError,
    PagefetchError,
    RequestValidationError,
    TransportError,
)
from .models import (
    BatchItem,
    BatchOutcome,
    EventType,
    ExtractedArticle,
    ExtractionConfig,
    FetchEvent,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
    NetworkConfig,
    PagefetchConfig,
)

__all__ = [
    "__version__",
    # Core
    "Fetcher",
    "fetch_blocking",
    "render_batch_report",
    # Config
    "PagefetchConfig",
    "NetworkConfig",
    "ExtractionConfig",
    # Requests and results
    "FetchRequest",
    "FetchSuccess",
    "FetchFailure",
    "FetchOutcome",
    "BatchItem",
    "BatchOutcome",
    "ExtractedArticle",
    # Events
    "EventType",
    "FetchEvent",
    # Errors
    "PagefetchError",
    "RequestValidationError",
    "TransportError",
    "HttpStatusError",
    "NoResponseError",
    "ConversionError",
]
