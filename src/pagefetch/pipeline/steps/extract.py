"""Pipeline step for main-content extraction."""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from ...conversion.extractor import MainContentExtractor
from ...conversion.protocols import ContentExtractor
from ...models.events import EventType, FetchEvent
from ...models.results import ExtractedArticle
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ExtractStep:
    """
    Pipeline step that isolates the main article of a page.

    Runs only when the request asks for simplification. A failed
    extraction is not an error: ctx.article stays None and the convert
    step falls back to the full document.

    Populates:
        ctx.article: The extracted article, or None
        ctx.metadata: Seeded with title/author when metadata was requested

    Example:
        step = ExtractStep()
        ctx = await step.execute(ctx)
        if ctx.article is None:
            ...  # full-document fallback
    """

    name = "extract"

    def __init__(self, extractor: Optional[ContentExtractor] = None):
        """
        Initialize the extract step.

        Args:
            extractor: Content extractor (uses default if None)
        """
        self._extractor = extractor or MainContentExtractor()

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Extract the main article from ctx.html.

        Args:
            ctx: Page context with HTML content
            emit: Optional event emitter

        Returns:
            Updated context with the article (or None)
        """
        if not ctx.request.simplify or ctx.html is None:
            return ctx

        article = self._parse_and_extract(ctx.html, ctx.url)

        if article is None:
            logger.info(f"No readable article found for {ctx.url}, converting full document")
            if emit:
                emit(
                    FetchEvent(
                        type=EventType.EXTRACTION_FALLBACK,
                        url=ctx.url,
                        message="Readability extraction failed, using full document",
                    )
                )
            return ctx

        ctx.article = article

        if ctx.request.include_metadata:
            ctx.metadata["title"] = article.title
            if article.byline:
                ctx.metadata["author"] = article.byline

        if emit:
            emit(
                FetchEvent(
                    type=EventType.CONTENT_EXTRACTED,
                    url=ctx.url,
                    message=f"Extracted article '{article.title}'",
                )
            )

        logger.debug(f"Extracted article '{article.title}' from {ctx.url}")
        return ctx

    def _parse_and_extract(self, html: str, url: str) -> Optional[ExtractedArticle]:
        """Parse a fresh tree for the extractor; a parse fault counts as no article."""
        try:
            document = BeautifulSoup(html, "html.parser")
        except Exception as e:
            logger.warning(f"Could not parse {url} for extraction: {e}")
            return None
        return self._extractor.extract(document, url)
