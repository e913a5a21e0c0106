"""MCP server exposing the fetch_url and fetch_urls tools."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult
from pydantic import Field

from .commands import fetch_url_command, fetch_urls_command
from .core import Fetcher
from .models.config import PagefetchConfig

logger = logging.getLogger(__name__)

SERVER_NAME = "fetch"


def create_server(config: PagefetchConfig | None = None) -> FastMCP:
    """
    Build the MCP server.

    A single Fetcher (and its HTTP session) lives for the lifetime of the
    server and is shared by both tools.

    Args:
        config: Configuration (defaults apply if None)

    Returns:
        FastMCP instance ready to run
    """
    config = config or PagefetchConfig()
    state: dict[str, Fetcher] = {}

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[None]:
        async with Fetcher(config) as fetcher:
            state["fetcher"] = fetcher
            logger.info("Fetch server ready")
            try:
                yield
            finally:
                state.pop("fetcher", None)

    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)

    @mcp.tool(description="Retrieves a URL from the internet and extracts its content as markdown")
    async def fetch_url(
        url: str = Field(..., description="URL to fetch"),
        includeMetadata: bool = Field(False, description="Whether to include page metadata as front matter"),
        simplify: bool = Field(True, description="Whether to extract the main article content only"),
        timeout: int = Field(config.default_timeout_ms, description="Request timeout in milliseconds"),
    ) -> CallToolResult:
        return await fetch_url_command(
            state["fetcher"],
            url,
            include_metadata=includeMetadata,
            simplify=simplify,
            timeout_ms=timeout,
        )

    @mcp.tool(description="Retrieves multiple URLs sequentially and returns their content as one markdown report")
    async def fetch_urls(
        urls: list[str] = Field(..., description="URLs to fetch, in order"),
        includeMetadata: bool = Field(False, description="Whether to include page metadata as front matter"),
        simplify: bool = Field(True, description="Whether to extract the main article content only"),
        timeout: int = Field(config.default_timeout_ms, description="Request timeout in milliseconds per URL"),
    ) -> CallToolResult:
        return await fetch_urls_command(
            state["fetcher"],
            urls,
            include_metadata=includeMetadata,
            simplify=simplify,
            timeout_ms=timeout,
        )

    return mcp


def run_server(config: PagefetchConfig | None = None) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    server = create_server(config)
    logger.info(f"Starting {SERVER_NAME} MCP server on stdio")
    server.run(transport="stdio")
