"""HTML to Markdown conversion."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from bs4 import Tag
from markdownify import ATX, BACKSLASH, MarkdownConverter

from ..errors import ConversionError

logger = logging.getLogger(__name__)


class _PageMarkdownConverter(MarkdownConverter):
    """markdownify converter with the strikethrough and passthrough rules."""

    def convert_del(self, el: Tag, text: str, parent_tags: set[str]) -> str:
        prefix, suffix, text = _chomp(text)
        if not text:
            return ""
        return f"{prefix}~~{text}~~{suffix}"

    convert_s = convert_del
    convert_strike = convert_del

    def _keep_html(self, el: Tag, text: str, parent_tags: set[str]) -> str:
        return str(el)

    convert_iframe = _keep_html
    convert_video = _keep_html
    convert_audio = _keep_html

    def convert_head(self, el: Tag, text: str, parent_tags: set[str]) -> str:
        return ""

    convert_noscript = convert_head
    convert_title = convert_head


def _chomp(text: str) -> tuple[str, str, str]:
    """Move leading/trailing spaces outside of inline markup."""
    prefix = " " if text[:1] == " " else ""
    suffix = " " if text[-1:] == " " else ""
    return prefix, suffix, text.strip()


class HtmlToMarkdown:
    """
    Converts HTML content to clean Markdown.

    Uses markdownify with ATX headings, fenced code blocks, ``-`` bullets
    and ``*`` emphasis. ``<del>``, ``<s>`` and ``<strike>`` become
    ``~~text~~``; ``<iframe>``, ``<video>`` and ``<audio>`` are kept as raw
    HTML. The same input always yields the same output.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert("<h1>Title</h1><p><del>old</del> new</p>")
    """

    def __init__(
        self,
        escape_underscores: bool = False,
        escape_asterisks: bool = True,
        code_language: str = "",
    ):
        """
        Initialize the Markdown converter.

        Args:
            escape_underscores: Escape ``_`` in text nodes
            escape_asterisks: Escape ``*`` in text nodes
            code_language: Default language hint for fenced code blocks
        """
        self._options = {
            "heading_style": ATX,
            "bullets": "-",
            "strong_em_symbol": "*",
            "code_language": code_language,
            "escape_underscores": escape_underscores,
            "escape_asterisks": escape_asterisks,
            "newline_style": BACKSLASH,
            "bs4_options": "html.parser",
        }

    def _clean_output(self, markdown: str) -> str:
        """Clean up the converted Markdown."""
        # Remove trailing whitespace on each line
        markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))

        # Remove excessive blank lines
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)

        return markdown.strip() + "\n" if markdown.strip() else ""

    def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string (fragment or full document)

        Returns:
            Markdown string

        Raises:
            ConversionError: If the HTML could not be converted
        """
        try:
            # A fresh converter per call keeps conversions independent
            converter = _PageMarkdownConverter(**self._options)
            markdown = converter.convert(html)
        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown: {e}")
            raise ConversionError(f"Failed to convert HTML to Markdown: {e}") from e

        return self._clean_output(markdown)


class FrontmatterBuilder:
    """
    Builds the metadata block placed in front of the Markdown body.

    Entries are written as ``key: value`` lines in insertion order, between
    ``---`` delimiters, followed by a blank line. Whitespace runs inside a value are
    collapsed so every entry stays on one line.

    Example:
        builder = FrontmatterBuilder()
        block = builder.build({"title": "Getting Started", "url": "https://docs.example.com"})
    """

    def build(self, metadata: Mapping[str, str]) -> str:
        """
        Build the front matter string.

        Args:
            metadata: Ordered key/value pairs

        Returns:
            Front matter string (with --- delimiters), or "" if metadata is empty
        """
        if not metadata:
            return ""

        lines = ["---"]
        for key, value in metadata.items():
            # Keep each entry on a single line
            safe_value = " ".join(str(value).split())
            lines.append(f"{key}: {safe_value}")
        lines.append("---")
        return "\n".join(lines) + "\n\n"
