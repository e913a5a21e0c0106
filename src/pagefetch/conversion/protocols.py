"""Protocol definitions for content conversion."""

from typing import Optional, Protocol

from bs4 import BeautifulSoup

from ..models.results import ExtractedArticle


class ContentExtractor(Protocol):
    """
    Protocol for extracting main content from HTML.

    Implementations should extract the main article content while
    removing navigation, headers, footers, ads, etc.
    """

    def extract(self, document: BeautifulSoup, url: str) -> Optional[ExtractedArticle]:
        """
        Extract main content from a parsed document.

        Args:
            document: Parsed HTML document
            url: Source URL (for relative link resolution)

        Returns:
            The article, or None when no article could be identified.
            Implementations must not raise.
        """
        ...


class MarkdownConverter(Protocol):
    """
    Protocol for converting HTML to Markdown.

    Implementations must be deterministic: the same HTML always
    produces the same Markdown.
    """

    def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string

        Returns:
            Markdown string
        """
        ...
