"""Pipeline step for HTML to Markdown conversion."""

import logging
from typing import Optional

from ...conversion.markdown import HtmlToMarkdown
from ...conversion.protocols import MarkdownConverter
from ...errors import ConversionError, PagefetchError
from ...models.events import EventType, FetchEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ConvertStep:
    """
    Pipeline step that converts HTML to Markdown.

    Converts the extracted article body when extraction succeeded,
    otherwise the full raw HTML.

    Example:
        step = ConvertStep()
        ctx = await step.execute(ctx, emit=callback)
        # ctx.markdown now contains the converted content
    """

    name = "convert"

    def __init__(self, converter: Optional[MarkdownConverter] = None):
        """
        Initialize the convert step.

        Args:
            converter: Markdown converter (uses default if None)
        """
        self._converter = converter or HtmlToMarkdown()

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Convert HTML content to Markdown.

        Reads from ctx.article or ctx.html, writes to ctx.markdown.

        Args:
            ctx: Page context with HTML content
            emit: Optional event emitter

        Returns:
            Updated context with markdown content

        Raises:
            ConversionError: If there is nothing to convert or conversion fails
        """
        if ctx.html is None:
            raise ConversionError("No HTML content to convert")

        source = ctx.article.content_html if ctx.article is not None else ctx.html

        try:
            markdown = self._converter.convert(source)
        except PagefetchError:
            raise
        except Exception as e:
            raise ConversionError(f"Conversion failed: {e}") from e

        ctx.markdown = markdown

        if emit:
            emit(
                FetchEvent(
                    type=EventType.PAGE_CONVERTED,
                    url=ctx.url,
                    message=f"Converted to {len(markdown)} bytes of Markdown",
                )
            )

        logger.debug(f"Converted {ctx.url} to {len(markdown)} bytes of Markdown")
        return ctx
