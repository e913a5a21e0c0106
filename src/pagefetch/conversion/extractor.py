"""Main content extraction from HTML pages."""

import logging
import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..models.config import ExtractionConfig
from ..models.results import ExtractedArticle

logger = logging.getLogger(__name__)

# Elements to remove (navigation, ads, etc.)
REMOVE_SELECTORS = [
    "script",
    "style",
    "noscript",
    "template",
    "nav",
    "header",
    "footer",
    "aside",
    "form",
    "button",
    "svg",
    "link",
    "meta",
    ".advertisement",
    ".ads",
    ".social-share",
    ".related-posts",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
    '[role="complementary"]',
    '[role="menu"]',
    '[role="dialog"]',
    '[aria-hidden="true"]',
    "[hidden]",
]

# Heuristics borrowed from the readability family of extractors
UNLIKELY_CANDIDATES = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|footer|gdpr|"
    r"header|legends|menu|related|remark|replies|rss|shoutbox|sidebar|skyscraper|social|sponsor|"
    r"supplemental|ad-break|agegate|pagination|pager|popup|yom-remote",
    re.IGNORECASE,
)
MAYBE_CANDIDATE = re.compile(r"and|article|body|column|content|main|shadow", re.IGNORECASE)
POSITIVE = re.compile(
    r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|story",
    re.IGNORECASE,
)
NEGATIVE = re.compile(
    r"-ad-|hidden|^hid$| hid$| hid |^hid |banner|combx|comment|com-|contact|foot|footer|footnote|"
    r"gdpr|masthead|media|meta|outbrain|promo|related|scroll|share|shoutbox|sidebar|skyscraper|"
    r"sponsor|shopping|tags|tool|widget",
    re.IGNORECASE,
)
BYLINE = re.compile(r"byline|author|dateline|writtenby|p-author", re.IGNORECASE)
VIDEO_HOSTS = re.compile(
    r"//(www\.)?((dailymotion|youtube|youtube-nocookie|player\.vimeo|v\.qq)\.com|"
    r"(archive|upload\.wikimedia)\.org|player\.twitch\.tv)",
    re.IGNORECASE,
)
TITLE_SEPARATORS = (" | ", " - ", " \u2014 ", " \u2013 ", " :: ", " / ")

# Starting scores for candidate containers, by tag name
TAG_BASE_SCORES = {
    "article": 8,
    "main": 8,
    "div": 5,
    "section": 3,
    "pre": 3,
    "td": 3,
    "blockquote": 3,
    "address": -3,
    "ol": -3,
    "ul": -3,
    "dl": -3,
    "dd": -3,
    "dt": -3,
    "li": -3,
    "form": -3,
    "h1": -5,
    "h2": -5,
    "h3": -5,
    "h4": -5,
    "h5": -5,
    "h6": -5,
    "th": -5,
}

# A <div> holding none of these is treated as a paragraph
BLOCK_TAGS = [
    "blockquote",
    "dl",
    "div",
    "img",
    "ol",
    "p",
    "pre",
    "table",
    "ul",
    "section",
    "article",
    "figure",
    "video",
    "audio",
    "iframe",
]

EMBED_TAGS = ("iframe", "video", "audio")

KEEP_ATTRS = {
    "href",
    "src",
    "alt",
    "title",
    "poster",
    "controls",
    "width",
    "height",
    "allow",
    "allowfullscreen",
    "type",
}


class MainContentExtractor:
    """
    Extracts the primary readable content of an HTML document.

    Scores paragraph containers the way readability does (dense text,
    commas, few links), keeps the best container plus its related
    siblings, and removes navigation, ads, and other boilerplate.

    Extraction that cannot produce a title and enough body text returns
    None; callers fall back to converting the full document. The extractor
    mutates the document it is given, so pass it a tree parsed for this call.

    Example:
        extractor = MainContentExtractor()
        soup = BeautifulSoup(html, "html.parser")
        article = extractor.extract(soup, "https://example.com/post")
        if article is None:
            ...  # convert the full document instead
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize the content extractor.

        Args:
            config: Extraction thresholds (uses defaults if None)
        """
        self._config = config or ExtractionConfig()

    # -- metadata ----------------------------------------------------------

    def _extract_title(self, soup: BeautifulSoup) -> Optional[str]:
        """Find the article title: og:title, then <title>, then the first <h1>."""
        og_title = soup.find("meta", property="og:title")
        if isinstance(og_title, Tag) and og_title.get("content"):
            title = str(og_title["content"]).strip()
            if title:
                return title

        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            title = " ".join(title_tag.get_text().split())
            if title:
                return self._strip_site_name(title)

        h1 = soup.find("h1")
        if isinstance(h1, Tag):
            title = h1.get_text(" ", strip=True)
            if title:
                return title

        return None

    def _strip_site_name(self, title: str) -> str:
        """Drop a trailing "| Site Name" when what remains still reads as a title."""
        for separator in TITLE_SEPARATORS:
            if separator in title:
                head = title.rsplit(separator, 1)[0].strip()
                if len(head.split()) >= 3:
                    return head
        return title

    def _extract_byline(self, soup: BeautifulSoup) -> Optional[str]:
        """Find an author line, removing it from the body when it is an element."""
        meta_author = soup.find("meta", attrs={"name": "author"})
        if isinstance(meta_author, Tag) and meta_author.get("content"):
            byline = str(meta_author["content"]).strip()
            if byline:
                return byline

        for tag in soup.find_all(True):
            if tag.name in ("meta", "link", "html", "body"):
                continue
            rel = tag.get("rel") or []
            is_byline = (
                "author" in rel
                or "author" in str(tag.get("itemprop", ""))
                or BYLINE.search(self._match_string(tag)) is not None
            )
            if not is_byline:
                continue
            text = tag.get_text(" ", strip=True)
            if text and len(text) < 100:
                tag.decompose()
                return text

        return None

    # -- cleanup -----------------------------------------------------------

    def _match_string(self, tag: Tag) -> str:
        classes = tag.get("class") or []
        if isinstance(classes, str):
            classes = [classes]
        return f"{' '.join(classes)} {tag.get('id') or ''}".strip()

    def _remove_unwanted(self, root: Tag) -> None:
        """Remove navigation, ads, and other unwanted elements."""
        for selector in REMOVE_SELECTORS:
            for el in root.select(selector):
                if not el.decomposed:
                    el.decompose()

        # Embedded frames survive only when they point at a video host
        for frame in root.find_all(["iframe", "embed", "object"]):
            if frame.decomposed:
                continue
            src = str(frame.get("src") or frame.get("data") or "")
            if not VIDEO_HOSTS.search(src):
                frame.decompose()

    def _remove_unlikely(self, root: Tag) -> None:
        """Remove elements whose class/id marks them as boilerplate."""
        for tag in root.find_all(True):
            if tag.decomposed or tag.name in ("body", "a", "article", "main"):
                continue
            match_string = self._match_string(tag)
            if not match_string:
                continue
            if UNLIKELY_CANDIDATES.search(match_string) and not MAYBE_CANDIDATE.search(match_string):
                if tag.find_parent(["table", "code", "pre"]) is None:
                    tag.decompose()

    def _divs_to_paragraphs(self, root: Tag) -> None:
        """Treat text-only divs as paragraphs so they take part in scoring."""
        for div in root.find_all("div"):
            if div.find(BLOCK_TAGS) is None and div.get_text(strip=True):
                div.name = "p"

    # -- scoring -----------------------------------------------------------

    def _class_weight(self, tag: Tag) -> int:
        weight = 0
        for value in (" ".join(tag.get("class") or []), str(tag.get("id") or "")):
            if not value:
                continue
            if NEGATIVE.search(value):
                weight -= 25
            if POSITIVE.search(value):
                weight += 25
        return weight

    def _link_density(self, tag: Tag) -> float:
        text_length = len(tag.get_text(" ", strip=True))
        if text_length == 0:
            return 0.0
        link_length = sum(len(a.get_text(" ", strip=True)) for a in tag.find_all("a"))
        return link_length / text_length

    def _score_paragraphs(self, root: Tag) -> dict[int, tuple[Tag, float]]:
        """Credit each paragraph's score to its ancestors, readability style."""
        scores: dict[int, tuple[Tag, float]] = {}

        for paragraph in root.find_all(["p", "pre", "td"]):
            text = paragraph.get_text(" ", strip=True)
            if len(text) < self._config.min_paragraph_length:
                continue

            content_score = 1 + text.count(",") + min(len(text) // 100, 3)

            for level, ancestor in enumerate(paragraph.parents):
                if level >= 5 or ancestor.name in (None, "[document]", "html"):
                    break
                if id(ancestor) not in scores:
                    base = TAG_BASE_SCORES.get(ancestor.name, 0) + self._class_weight(ancestor)
                    scores[id(ancestor)] = (ancestor, float(base))
                divider = 1 if level == 0 else 2 if level == 1 else level * 3
                tag, score = scores[id(ancestor)]
                scores[id(ancestor)] = (tag, score + content_score / divider)

        # Scale by how much of each candidate is link text
        return {
            key: (tag, score * (1 - self._link_density(tag)))
            for key, (tag, score) in scores.items()
        }

    def _select_content(self, scores: dict[int, tuple[Tag, float]]) -> Optional[Tag]:
        """Pick the top candidate and merge in siblings that belong to the article."""
        if not scores:
            return None

        ranked = sorted(scores.values(), key=lambda item: item[1], reverse=True)
        top, top_score = ranked[0]

        parent = top.parent
        if parent is None or parent.name == "[document]":
            return top

        threshold = max(10.0, top_score * 0.2)
        top_classes = top.get("class") or []
        included: list[Tag] = []

        for sibling in parent.find_all(True, recursive=False):
            if sibling is top:
                included.append(sibling)
                continue

            bonus = top_score * 0.2 if top_classes and sibling.get("class") == top_classes else 0.0
            if id(sibling) in scores and scores[id(sibling)][1] + bonus >= threshold:
                included.append(sibling)
            elif sibling.name == "p":
                text = sibling.get_text(" ", strip=True)
                density = self._link_density(sibling)
                if len(text) > 80 and density < 0.25:
                    included.append(sibling)
                elif 0 < len(text) <= 80 and density == 0 and re.search(r"\.( |$)", text):
                    included.append(sibling)

        wrapper = BeautifulSoup("<div></div>", "html.parser")
        container = wrapper.div
        for node in included:
            container.append(node.extract())
        return container

    def _clean_conditionally(self, content: Tag) -> None:
        """Drop link-heavy or negatively weighted blocks left inside the article."""
        for tag in content.find_all(["div", "section", "ul", "ol", "table"]):
            if tag.decomposed or tag.parent is content or tag.find(EMBED_TAGS) is not None:
                continue
            text_length = len(tag.get_text(" ", strip=True))
            if self._class_weight(tag) < 0 or (self._link_density(tag) > 0.5 and text_length < 200):
                tag.decompose()

    # -- output ------------------------------------------------------------

    def _clean_attributes(self, element: Tag) -> None:
        """Remove unnecessary attributes from elements."""
        for tag in element.find_all(True):
            attrs_to_remove = [attr for attr in tag.attrs if attr not in KEEP_ATTRS]
            for attr in attrs_to_remove:
                del tag[attr]

    def _resolve_links(self, element: Tag, base_url: str) -> None:
        """Convert relative URLs to absolute URLs."""
        for tag in element.find_all("a", href=True):
            href = tag["href"]
            if href.startswith("#"):
                continue  # Keep anchor links
            if not href.startswith(("http://", "https://", "//", "mailto:", "tel:")):
                tag["href"] = urljoin(base_url, href)

        for tag in element.find_all(src=True):
            src = tag["src"]
            if not src.startswith(("http://", "https://", "//", "data:")):
                tag["src"] = urljoin(base_url, src)

    def _clean_whitespace(self, text: str) -> str:
        """Clean up excessive whitespace."""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = re.sub(r"\n{3,}", "\n\n", text)
        text = "\n".join(line.rstrip() for line in text.split("\n"))
        return text.strip()

    def _extract(self, soup: BeautifulSoup, url: str) -> Optional[ExtractedArticle]:
        title = self._extract_title(soup)
        if not title:
            logger.debug(f"No title found for {url}")
            return None

        byline = self._extract_byline(soup)

        body = soup.find("body")
        root = body if isinstance(body, Tag) else soup

        self._remove_unwanted(root)
        self._remove_unlikely(root)
        self._divs_to_paragraphs(root)

        content = self._select_content(self._score_paragraphs(root))
        if content is None:
            logger.debug(f"No content candidates found for {url}")
            return None

        self._clean_conditionally(content)

        text_length = len(content.get_text(" ", strip=True))
        if text_length < self._config.char_threshold:
            logger.debug(
                f"Extracted text for {url} too short ({text_length} < {self._config.char_threshold} chars)"
            )
            return None

        self._clean_attributes(content)
        self._resolve_links(content, url)

        return ExtractedArticle(
            title=title,
            content_html=self._clean_whitespace(str(content)),
            byline=byline,
        )

    def extract(self, document: BeautifulSoup, url: str) -> Optional[ExtractedArticle]:
        """
        Extract main content from a parsed document.

        Args:
            document: Parsed HTML document (modified in place)
            url: Source URL for resolving relative links

        Returns:
            ExtractedArticle, or None when no article could be identified
        """
        try:
            return self._extract(document, url)
        except Exception as e:
            logger.warning(f"Readability extraction failed for {url}: {e}")
            return None
