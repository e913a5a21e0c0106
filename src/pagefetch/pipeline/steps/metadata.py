"""Pipeline step for metadata extraction."""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from ...conversion.metadata import MetadataHarvester
from ...models.events import EventType, FetchEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class MetadataStep:
    """
    Pipeline step that harvests page metadata.

    Runs only when the request asks for metadata. Parses the full
    document on its own, independently of any extraction, and merges
    the result into metadata seeded by earlier steps.

    Example:
        step = MetadataStep()
        ctx = await step.execute(ctx, emit=callback)
        # ctx.metadata ends with "url" and "fetchedAt"
    """

    name = "metadata"

    def __init__(self, harvester: Optional[MetadataHarvester] = None):
        """
        Initialize the metadata step.

        Args:
            harvester: Metadata harvester (uses default if None)
        """
        self._harvester = harvester or MetadataHarvester()

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Harvest metadata from ctx.html.

        Args:
            ctx: Page context with HTML content
            emit: Optional event emitter

        Returns:
            Updated context with metadata
        """
        if not ctx.request.include_metadata or ctx.html is None:
            return ctx

        document = BeautifulSoup(ctx.html, "html.parser")
        ctx.metadata = self._harvester.harvest(document, ctx.url, seed=ctx.metadata)

        if emit:
            emit(
                FetchEvent(
                    type=EventType.METADATA_EXTRACTED,
                    url=ctx.url,
                    message=f"Extracted metadata: title='{ctx.metadata.get('title', 'None')}'",
                )
            )

        logger.debug(f"Extracted {len(ctx.metadata)} metadata fields for {ctx.url}")
        return ctx
