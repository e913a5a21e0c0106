"""Metadata harvesting from <title> and <meta> tags."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetaRule:
    """
    Maps a <meta> key to a metadata field.

    Attributes:
        matches: Predicate on the tag's name/property value
        destination: Metadata key to store under, or None to keep the tag's own key
    """

    matches: Callable[[str], bool]
    destination: Optional[str] = None

    def key_for(self, name: str) -> str:
        return self.destination or name


# Evaluated top to bottom; the first matching rule wins. Matching is a
# case-sensitive substring test on the tag's name (or property).
META_RULES: tuple[MetaRule, ...] = (
    MetaRule(lambda name: "description" in name, "description"),
    MetaRule(lambda name: "author" in name, "author"),
    MetaRule(lambda name: "keywords" in name, "keywords"),
    MetaRule(lambda name: "og:" in name),
)


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a UTC timestamp as ISO-8601 with milliseconds and a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class MetadataHarvester:
    """
    Collects page metadata into an ordered mapping.

    Keys are inserted in this order: seeded values (article title/byline),
    ``title`` from <title> if none was seeded, matched <meta> fields in
    document order, then ``url`` and ``fetchedAt``. A key keeps the
    position of its first insertion; later matches overwrite its value.

    Example:
        harvester = MetadataHarvester()
        soup = BeautifulSoup(html, "html.parser")
        metadata = harvester.harvest(soup, "https://example.com/a")
        # {"title": "...", "author": "...", "url": "...", "fetchedAt": "..."}
    """

    def __init__(self, rules: tuple[MetaRule, ...] = META_RULES):
        self._rules = rules

    def _classify(self, name: str) -> Optional[str]:
        for rule in self._rules:
            if rule.matches(name):
                return rule.key_for(name)
        return None

    def _document_title(self, soup: BeautifulSoup) -> Optional[str]:
        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            title = title_tag.get_text().strip()
            if title:
                return title
        return None

    def harvest(
        self,
        document: BeautifulSoup,
        url: str,
        seed: Optional[Mapping[str, str]] = None,
        fetched_at: Optional[datetime] = None,
    ) -> dict[str, str]:
        """
        Harvest metadata from a parsed document.

        Args:
            document: Parsed HTML document
            url: Source URL, stored under ``url``
            seed: Values already known (e.g. from content extraction)
            fetched_at: Fetch completion time (defaults to now)

        Returns:
            Ordered metadata mapping without empty keys or values
        """
        metadata: dict[str, str] = {key: value for key, value in (seed or {}).items() if key and value}

        if not metadata.get("title"):
            title = self._document_title(document)
            if title:
                metadata["title"] = title

        for tag in document.find_all("meta"):
            name = tag.get("name") or tag.get("property")
            content = tag.get("content")
            if not name or not content:
                continue

            key = self._classify(str(name))
            if key is None:
                continue
            metadata[key] = str(content)

        metadata["url"] = url
        metadata["fetchedAt"] = iso_timestamp(fetched_at)

        logger.debug(f"Harvested {len(metadata)} metadata fields for {url}")
        return metadata
