"""Shared fixtures for pagefetch tests."""

import pytest
from pagefetch.http.protocols import HttpResponse


class FakeHttpClient:
    """In-memory HttpClient serving canned responses by URL.

    Unknown URLs get a 404; an exception stored for a URL is raised.
    """

    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    async def get(self, url, *, timeout=30.0, headers=None):
        self.requested.append((url, timeout))
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            return HttpResponse(
                status_code=404,
                content=b"<html><body>Not found</body></html>",
                content_type="text/html",
                reason="Not Found",
                url=url,
            )
        return page

    def decode_content(self, response):
        return response.content.decode("utf-8")


def html_page(html, url="", status_code=200, reason="OK"):
    return HttpResponse(
        status_code=status_code,
        content=html.encode("utf-8"),
        content_type="text/html; charset=utf-8",
        reason=reason,
        url=url,
    )


@pytest.fixture
def pages():
    """URL to response (or exception) mapping served by fake_client."""
    return {}


@pytest.fixture
def fake_client(pages):
    return FakeHttpClient(pages)


@pytest.fixture
def page():
    """Factory for HTML responses."""
    return html_page
