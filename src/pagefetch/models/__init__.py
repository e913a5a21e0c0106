"""Pagefetch configuration, request, result and event models."""

from .config import ExtractionConfig, NetworkConfig, PagefetchConfig
from .events import EventType, FetchEvent
from .request import FetchRequest, validate_url
from .results import (
    BatchItem,
    BatchOutcome,
    ExtractedArticle,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
)

__all__ = [
    # Config
    "ExtractionConfig",
    "NetworkConfig",
    "PagefetchConfig",
    # Request
    "FetchRequest",
    "validate_url",
    # Results
    "BatchItem",
    "BatchOutcome",
    "ExtractedArticle",
    "FetchFailure",
    "FetchOutcome",
    "FetchSuccess",
    # Events
    "EventType",
    "FetchEvent",
]
