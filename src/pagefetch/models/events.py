"""Event types emitted while a page moves through the fetch pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during fetch operations."""

    # Fetch phase
    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"

    # Processing phase
    CONTENT_EXTRACTED = "content_extracted"
    EXTRACTION_FALLBACK = "extraction_fallback"
    PAGE_CONVERTED = "page_converted"
    METADATA_EXTRACTED = "metadata_extracted"

    # Batch progress
    BATCH_PROGRESS = "batch_progress"


@dataclass
class FetchEvent:
    """
    Event emitted during fetch operations.

    Example:
        def on_event(event: FetchEvent) -> None:
            if event.type == EventType.FETCH_FAILED:
                print(f"Error: {event.url} - {event.error}")

        await fetcher.fetch(request, emit=on_event)
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Common fields
    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    # Progress tracking
    current: Optional[int] = None
    total: Optional[int] = None

    # Typed payload fields for specific events
    bytes_downloaded: Optional[int] = None
    status_code: Optional[int] = None
    content_type: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.FETCH_FAILED
