"""Result types produced by the extraction and fetch pipeline."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class ExtractedArticle:
    """
    Main readable content isolated from a page.

    Attributes:
        title: Article title
        content_html: Cleaned HTML of the article body
        byline: Author line, if one was found
    """

    title: str
    content_html: str
    byline: Optional[str] = None


@dataclass(frozen=True)
class FetchSuccess:
    """Final assembled document for a URL (front matter plus Markdown)."""

    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchFailure:
    """Human-readable reason a URL could not be fetched or converted."""

    message: str

    @property
    def ok(self) -> bool:
        return False


FetchOutcome = Union[FetchSuccess, FetchFailure]


@dataclass(frozen=True)
class BatchItem:
    """Outcome for one URL of a batch request."""

    url: str
    outcome: FetchOutcome


@dataclass
class BatchOutcome:
    """
    Outcomes of a batch request, one per input URL, in input order.

    Example:
        batch = await fetcher.fetch_many(urls)
        for item in batch:
            print(item.url, item.outcome.ok)
    """

    items: list[BatchItem] = field(default_factory=list)

    def append(self, url: str, outcome: FetchOutcome) -> None:
        self.items.append(BatchItem(url=url, outcome=outcome))

    def __iter__(self) -> Iterator[BatchItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def failed(self) -> int:
        """Number of URLs that ended in a failure."""
        return sum(1 for item in self.items if not item.outcome.ok)
