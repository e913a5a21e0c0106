"""Tests for content extraction, Markdown conversion and metadata harvesting."""

from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup
from pagefetch.conversion import (
    FrontmatterBuilder,
    HtmlToMarkdown,
    MainContentExtractor,
    MetadataHarvester,
    iso_timestamp,
)
from pagefetch.errors import ConversionError
from pagefetch.models.config import ExtractionConfig

ARTICLE_URL = "https://blog.example.com/posts/async-pipelines"

ARTICLE_HTML = """
<html>
<head>
    <title>Understanding Async Pipelines | Example Blog</title>
    <meta name="description" content="A walk through async pipelines">
    <meta property="og:type" content="article">
</head>
<body>
    <nav><a href="/">Home</a> <a href="/about">About</a></nav>
    <div class="sidebar"><p>Subscribe to our newsletter for weekly updates, tips and more.</p></div>
    <article class="post">
        <h1>Understanding Async Pipelines</h1>
        <p class="byline">By Jane Doe</p>
        <p>Asynchronous pipelines let a program overlap waiting with useful work, which matters
        whenever most of the time is spent on the network, on disk, or on another process.</p>
        <p>Each stage receives a context object, does one thing to it, and hands it on. Stages are
        small, easy to test, and can be reordered, replaced or skipped without touching the rest.</p>
        <p>Errors are captured at the pipeline boundary rather than inside each stage, so a failing
        stage stops the run for one item while the caller still gets a useful message. See the
        <a href="/docs/guide">guide</a> for details.</p>
        <p><del>Callbacks everywhere</del> was the old approach, and it made control flow very hard
        to follow once retries, timeouts, and cancellation entered the picture.</p>
        <iframe src="https://www.youtube.com/embed/abc123"></iframe>
        <iframe src="https://ads.example.net/banner"></iframe>
    </article>
    <footer><p>Copyright 2024 Example Blog, all rights reserved.</p></footer>
    <script>var tracking = true;</script>
</body>
</html>
"""


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestMainContentExtractor:
    """Tests for MainContentExtractor."""

    def test_extracts_article(self):
        """Test extracting the main article of a page."""
        article = MainContentExtractor().extract(parse(ARTICLE_HTML), ARTICLE_URL)

        assert article is not None
        assert article.title == "Understanding Async Pipelines"
        assert "overlap waiting with useful work" in article.content_html
        assert "Errors are captured at the pipeline boundary" in article.content_html

    def test_extracts_byline_element(self):
        """Test that a byline element becomes the author and leaves the body."""
        article = MainContentExtractor().extract(parse(ARTICLE_HTML), ARTICLE_URL)

        assert article is not None
        assert article.byline == "By Jane Doe"
        assert "By Jane Doe" not in article.content_html

    def test_removes_boilerplate(self):
        """Test that navigation, sidebars, footers and scripts are removed."""
        article = MainContentExtractor().extract(parse(ARTICLE_HTML), ARTICLE_URL)

        assert article is not None
        assert "About" not in article.content_html
        assert "Subscribe" not in article.content_html
        assert "Copyright" not in article.content_html
        assert "tracking" not in article.content_html

    def test_removes_header_elements(self):
        """Test that <header> elements are dropped even inside the article."""
        html = """
        <html><head><title>Release Notes</title></head>
        <body><article>
            <header><p>Filed under engineering notes, updated weekly by the editors.</p></header>
            <p>Version two ships a faster parser, clearer errors, and new defaults for everyone.</p>
            <p>Upgrading is a matter of bumping the dependency, since the public API is unchanged.</p>
        </article></body></html>
        """
        extractor = MainContentExtractor(ExtractionConfig(char_threshold=10))
        article = extractor.extract(parse(html), "https://example.com/notes")

        assert article is not None
        assert "faster parser" in article.content_html
        assert "Filed under" not in article.content_html
        assert "<header" not in article.content_html

    def test_keeps_video_embeds_only(self):
        """Test that video iframes survive and other iframes do not."""
        article = MainContentExtractor().extract(parse(ARTICLE_HTML), ARTICLE_URL)

        assert article is not None
        assert "https://www.youtube.com/embed/abc123" in article.content_html
        assert "ads.example.net" not in article.content_html

    def test_resolves_relative_links(self):
        """Test that relative links are made absolute."""
        article = MainContentExtractor().extract(parse(ARTICLE_HTML), ARTICLE_URL)

        assert article is not None
        assert 'href="https://blog.example.com/docs/guide"' in article.content_html

    def test_strips_presentation_attributes(self):
        """Test that class attributes are dropped from the article."""
        article = MainContentExtractor().extract(parse(ARTICLE_HTML), ARTICLE_URL)

        assert article is not None
        assert 'class="post"' not in article.content_html

    def test_short_page_returns_none(self):
        """Test that a page without enough text is not treated as an article."""
        html = "<html><head><title>Hello</title></head><body><p>Hi</p></body></html>"
        assert MainContentExtractor().extract(parse(html), "https://example.com") is None

    def test_missing_title_returns_none(self):
        """Test that extraction needs a title."""
        html = "<html><body><div>" + "<p>Plenty of words, in a paragraph, without any title.</p>" * 20
        html += "</div></body></html>"
        assert MainContentExtractor().extract(parse(html), "https://example.com") is None

    def test_char_threshold_is_configurable(self):
        """Test that a lower threshold accepts short articles."""
        html = """
        <html><head><title>Short note</title></head>
        <body><div><p>This paragraph has enough text, barely.</p></div></body></html>
        """
        extractor = MainContentExtractor(ExtractionConfig(char_threshold=10))
        article = extractor.extract(parse(html), "https://example.com/note")

        assert article is not None
        assert article.title == "Short note"
        assert "enough text" in article.content_html

    def test_prefers_og_title(self):
        """Test that og:title wins over the <title> tag."""
        html = """
        <html><head>
            <title>Page | Site</title>
            <meta property="og:title" content="The Real Title">
        </head>
        <body><div><p>This paragraph has enough text, barely.</p></div></body></html>
        """
        extractor = MainContentExtractor(ExtractionConfig(char_threshold=10))
        article = extractor.extract(parse(html), "https://example.com")

        assert article is not None
        assert article.title == "The Real Title"

    def test_keeps_short_title_with_site_name(self):
        """Test that a site suffix is kept when the remainder is too short."""
        html = """
        <html><head><title>Home | Example</title></head>
        <body><div><p>This paragraph has enough text, barely.</p></div></body></html>
        """
        extractor = MainContentExtractor(ExtractionConfig(char_threshold=10))
        article = extractor.extract(parse(html), "https://example.com")

        assert article is not None
        assert article.title == "Home | Example"

    def test_byline_from_meta_author(self):
        """Test that meta author is used as the byline."""
        html = """
        <html><head><title>Note</title><meta name="author" content="Jane"></head>
        <body><div><p>This paragraph has enough text, barely.</p></div></body></html>
        """
        extractor = MainContentExtractor(ExtractionConfig(char_threshold=10))
        article = extractor.extract(parse(html), "https://example.com")

        assert article is not None
        assert article.byline == "Jane"


class TestHtmlToMarkdown:
    """Tests for HtmlToMarkdown."""

    def test_converts_headings(self):
        """Test heading conversion uses ATX style."""
        md = HtmlToMarkdown().convert("<h1>Title</h1><h2>Subtitle</h2>")
        assert "# Title" in md
        assert "## Subtitle" in md

    def test_converts_paragraphs(self):
        """Test paragraph conversion."""
        md = HtmlToMarkdown().convert("<p>First paragraph.</p><p>Second paragraph.</p>")
        assert "First paragraph.\n\nSecond paragraph." in md

    def test_converts_links(self):
        """Test link conversion."""
        md = HtmlToMarkdown().convert('<p>Read the <a href="https://example.com/docs">docs</a>.</p>')
        assert "[docs](https://example.com/docs)" in md

    def test_converts_lists_with_dashes(self):
        """Test bullet lists use '-'."""
        md = HtmlToMarkdown().convert("<ul><li>One</li><li>Two</li></ul>")
        assert "- One" in md
        assert "- Two" in md

    def test_converts_code_blocks_fenced(self):
        """Test code blocks are fenced."""
        md = HtmlToMarkdown().convert("<pre><code>print('hello')</code></pre>")
        assert "```" in md
        assert "print('hello')" in md

    def test_converts_bold_and_italic(self):
        """Test strong and emphasis markers."""
        md = HtmlToMarkdown().convert("<p><strong>bold</strong> and <em>italic</em></p>")
        assert "**bold**" in md
        assert "*italic*" in md

    @pytest.mark.parametrize("tag", ["del", "s", "strike"])
    def test_converts_strikethrough(self, tag):
        """Test strikethrough tags become ~~text~~."""
        md = HtmlToMarkdown().convert(f"<p><{tag}>gone</{tag}> kept</p>")
        assert "~~gone~~ kept" in md

    def test_keeps_iframe_as_html(self):
        """Test iframes pass through as raw HTML."""
        html = '<p>Intro</p><iframe src="https://www.youtube.com/embed/xyz"></iframe>'
        md = HtmlToMarkdown().convert(html)
        assert '<iframe src="https://www.youtube.com/embed/xyz"></iframe>' in md

    def test_keeps_video_and_audio_as_html(self):
        """Test video and audio pass through as raw HTML."""
        md = HtmlToMarkdown().convert('<video src="clip.mp4"></video><audio src="talk.mp3"></audio>')
        assert '<video src="clip.mp4"></video>' in md
        assert '<audio src="talk.mp3"></audio>' in md

    def test_drops_head_and_scripts(self):
        """Test document head and scripts produce no output."""
        html = """
        <html><head><title>Tab title</title><style>p { color: red; }</style></head>
        <body><script>alert(1)</script><p>Body text</p></body></html>
        """
        assert HtmlToMarkdown().convert(html) == "Body text\n"

    def test_keeps_underscores(self):
        """Test underscores are not escaped."""
        md = HtmlToMarkdown().convert("<p>use snake_case names</p>")
        assert "snake_case" in md

    def test_cleans_excessive_whitespace(self):
        """Test blank-line runs collapse and output ends with one newline."""
        md = HtmlToMarkdown().convert("<div><p>One   </p></div>\n\n\n\n<div><p>Two</p></div>\n\n")
        assert md == "One\n\nTwo\n"

    def test_empty_input(self):
        """Test empty HTML gives empty Markdown."""
        assert HtmlToMarkdown().convert("") == ""

    def test_conversion_is_deterministic(self):
        """Test converting the same HTML twice gives the same output."""
        converter = HtmlToMarkdown()
        assert converter.convert(ARTICLE_HTML) == converter.convert(ARTICLE_HTML)

    def test_wraps_converter_failures(self, monkeypatch):
        """Test unexpected converter errors become ConversionError."""
        from pagefetch.conversion import markdown as markdown_module

        def broken(self, html):
            raise ValueError("boom")

        monkeypatch.setattr(markdown_module._PageMarkdownConverter, "convert", broken)

        with pytest.raises(ConversionError, match="boom"):
            HtmlToMarkdown().convert("<p>x</p>")


class TestFrontmatterBuilder:
    """Tests for FrontmatterBuilder."""

    def test_builds_basic_frontmatter(self):
        """Test basic frontmatter generation."""
        fm = FrontmatterBuilder().build({"title": "Hello", "url": "https://example.com"})
        assert fm == "---\ntitle: Hello\nurl: https://example.com\n---\n\n"

    def test_preserves_insertion_order(self):
        """Test entries keep their order."""
        fm = FrontmatterBuilder().build({"url": "u", "title": "t", "author": "a"})
        assert fm.index("url:") < fm.index("title:") < fm.index("author:")

    def test_collapses_multiline_values(self):
        """Test values are kept on one line."""
        fm = FrontmatterBuilder().build({"description": "line one\n   line two"})
        assert "description: line one line two\n" in fm

    def test_empty_metadata(self):
        """Test empty metadata produces no block."""
        assert FrontmatterBuilder().build({}) == ""


class TestMetadataHarvester:
    """Tests for MetadataHarvester."""

    FETCHED_AT = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)

    def test_title_author_url_and_timestamp(self):
        """Test the common head: <title>, meta author, url, fetchedAt."""
        html = '<html><head><title>Hello</title><meta name="author" content="Jane"></head></html>'
        metadata = MetadataHarvester().harvest(parse(html), "https://example.com/a", fetched_at=self.FETCHED_AT)

        assert metadata == {
            "title": "Hello",
            "author": "Jane",
            "url": "https://example.com/a",
            "fetchedAt": "2024-01-02T03:04:05.678Z",
        }
        assert list(metadata) == ["title", "author", "url", "fetchedAt"]

    def test_seeded_title_wins_over_title_tag(self):
        """Test a seeded title is not replaced by <title>."""
        html = "<html><head><title>Tab | Site</title></head></html>"
        metadata = MetadataHarvester().harvest(parse(html), "https://example.com", seed={"title": "Article"})
        assert metadata["title"] == "Article"

    def test_meta_author_overwrites_seeded_author(self):
        """Test later values replace earlier ones but keep the key position."""
        html = '<html><head><meta name="author" content="Jane"></head></html>'
        metadata = MetadataHarvester().harvest(
            parse(html),
            "https://example.com",
            seed={"title": "Article", "author": "By Someone"},
        )
        assert metadata["author"] == "Jane"
        assert list(metadata)[:2] == ["title", "author"]

    def test_classifies_meta_names(self):
        """Test description/keywords/og: classification."""
        html = """
        <html><head>
            <meta name="keywords" content="async, python">
            <meta property="og:image" content="https://example.com/cover.png">
            <meta property="og:description" content="Open graph description">
            <meta name="viewport" content="width=device-width">
        </head></html>
        """
        metadata = MetadataHarvester().harvest(parse(html), "https://example.com")

        assert metadata["keywords"] == "async, python"
        assert metadata["og:image"] == "https://example.com/cover.png"
        # description rule is checked before og:
        assert metadata["description"] == "Open graph description"
        assert "og:description" not in metadata
        assert "viewport" not in metadata

    def test_skips_meta_without_content(self):
        """Test meta tags with empty content are ignored."""
        html = '<html><head><meta name="description" content=""></head></html>'
        metadata = MetadataHarvester().harvest(parse(html), "https://example.com")
        assert "description" not in metadata

    def test_no_head_still_has_url_and_timestamp(self):
        """Test a bare document still yields url and fetchedAt."""
        metadata = MetadataHarvester().harvest(parse("<p>Hi</p>"), "https://example.com")
        assert list(metadata) == ["url", "fetchedAt"]

    def test_empty_title_tag_ignored(self):
        """Test an empty <title> does not produce a title entry."""
        metadata = MetadataHarvester().harvest(parse("<title>  </title>"), "https://example.com")
        assert "title" not in metadata


class TestIsoTimestamp:
    """Tests for iso_timestamp."""

    def test_formats_utc_with_milliseconds(self):
        moment = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
        assert iso_timestamp(moment) == "2024-05-06T07:08:09.123Z"

    def test_defaults_to_now(self):
        stamp = iso_timestamp()
        assert stamp.endswith("Z")
        assert "T" in stamp
