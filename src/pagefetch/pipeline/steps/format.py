"""Pipeline step that assembles the final document."""

from typing import Optional

from ...conversion.markdown import FrontmatterBuilder
from ...errors import ConversionError
from ..base import EventEmitter, PageContext


class FormatStep:
    """
    Pipeline step that prepends front matter to the Markdown body.

    Writes ctx.text: the front matter block (when metadata was requested
    and is non-empty) followed by ctx.markdown.
    """

    name = "format"

    def __init__(self, frontmatter_builder: Optional[FrontmatterBuilder] = None):
        self._frontmatter_builder = frontmatter_builder or FrontmatterBuilder()

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        if ctx.markdown is None:
            raise ConversionError("No Markdown content to format")

        front_matter = ""
        if ctx.request.include_metadata and ctx.metadata:
            front_matter = self._frontmatter_builder.build(ctx.metadata)

        ctx.text = front_matter + ctx.markdown
        return ctx
