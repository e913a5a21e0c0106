"""Content conversion for pagefetch (extraction, Markdown, metadata, front matter)."""

from .extractor import MainContentExtractor
from .markdown import FrontmatterBuilder, HtmlToMarkdown
from .metadata import META_RULES, MetadataHarvester, MetaRule, iso_timestamp
from .protocols import ContentExtractor, MarkdownConverter

__all__ = [
    # Protocols
    "ContentExtractor",
    "MarkdownConverter",
    # Implementations
    "MainContentExtractor",
    "HtmlToMarkdown",
    "FrontmatterBuilder",
    "MetadataHarvester",
    "MetaRule",
    "META_RULES",
    "iso_timestamp",
]
