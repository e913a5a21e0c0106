"""Fetcher: the single-URL and batch entry points."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from types import TracebackType
from typing import Callable

from ..conversion import HtmlToMarkdown, MainContentExtractor, MetadataHarvester
from ..http import AsyncHttpClient, HttpClient
from ..models.config import PagefetchConfig
from ..models.events import EventType, FetchEvent
from ..models.request import FetchRequest
from ..models.results import BatchOutcome, FetchOutcome
from ..pipeline.base import FetchPipeline
from ..pipeline.base import FetchStep as FetchStepProtocol
from ..pipeline.steps import ConvertStep, ExtractStep, FetchStep, FormatStep, MetadataStep

logger = logging.getLogger(__name__)


class Fetcher:
    """
    Primary API for pagefetch.

    Runs each request through the fetch pipeline and collapses the result
    into a FetchOutcome. Batches are processed strictly one URL at a time,
    in input order; a failure for one URL never stops the rest.

    Example:
        async with Fetcher(PagefetchConfig()) as fetcher:
            outcome = await fetcher.fetch(FetchRequest(url="https://example.com"))
            if outcome.ok:
                print(outcome.text)

            batch = await fetcher.fetch_many(
                ["https://example.com/a", "https://example.com/b"],
                include_metadata=True,
            )
            print(render_batch_report(batch))
    """

    def __init__(
        self,
        config: PagefetchConfig | None = None,
        http_client: HttpClient | None = None,
    ):
        """
        Initialize the Fetcher.

        Args:
            config: Configuration (defaults apply if None)
            http_client: Transport to use instead of an owned AsyncHttpClient
        """
        self.config = config or PagefetchConfig()
        self._http_client: HttpClient | None = http_client
        self._owned_client: AsyncHttpClient | None = None
        self._pipeline: FetchPipeline | None = None

    async def __aenter__(self) -> Fetcher:
        """Enter async context and initialize components."""
        if self._http_client is None:
            self._owned_client = AsyncHttpClient(
                network=self.config.network,
                default_timeout=self.config.default_timeout_ms / 1000,
            )
            await self._owned_client.__aenter__()
            self._http_client = self._owned_client

        steps: list[FetchStepProtocol] = [
            FetchStep(http_client=self._http_client),
            ExtractStep(extractor=MainContentExtractor(self.config.extraction)),
            ConvertStep(converter=HtmlToMarkdown()),
            MetadataStep(harvester=MetadataHarvester()),
            FormatStep(),
        ]
        self._pipeline = FetchPipeline(steps=steps)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and cleanup resources."""
        if self._owned_client:
            await self._owned_client.__aexit__(exc_type, exc_val, exc_tb)
            self._owned_client = None
            self._http_client = None
        self._pipeline = None

    async def fetch(
        self,
        request: FetchRequest,
        emit: Callable[[FetchEvent], None] | None = None,
    ) -> FetchOutcome:
        """
        Fetch one URL and convert it to Markdown.

        Args:
            request: Validated fetch request
            emit: Optional callback for pipeline events

        Returns:
            FetchSuccess with the final document, or FetchFailure
        """
        if self._pipeline is None:
            raise RuntimeError("Fetcher not initialized. Use 'async with' context manager.")

        ctx = await self._pipeline.execute(request, emit=emit)
        return ctx.to_outcome()

    async def fetch_many(
        self,
        urls: Sequence[str],
        include_metadata: bool = False,
        simplify: bool = True,
        timeout_ms: int | None = None,
        emit: Callable[[FetchEvent], None] | None = None,
    ) -> BatchOutcome:
        """
        Fetch several URLs sequentially with shared options.

        Every URL is validated before the first request goes out.

        Args:
            urls: URLs to fetch, in report order
            include_metadata: Prepend front matter to each document
            simplify: Run main-content extraction
            timeout_ms: Per-request timeout (config default if None)
            emit: Optional callback for pipeline and progress events

        Returns:
            BatchOutcome with exactly one item per input URL, in input order

        Raises:
            RequestValidationError: If any URL is invalid
        """
        if timeout_ms is None:
            timeout_ms = self.config.default_timeout_ms

        requests = [
            FetchRequest.build(
                url=url,
                include_metadata=include_metadata,
                simplify=simplify,
                timeout_ms=timeout_ms,
            )
            for url in urls
        ]

        batch = BatchOutcome()
        total = len(requests)
        for i, request in enumerate(requests):
            if emit:
                emit(
                    FetchEvent(
                        type=EventType.BATCH_PROGRESS,
                        url=request.url,
                        current=i + 1,
                        total=total,
                        message=f"Processing {i + 1}/{total}: {request.url}",
                    )
                )
            outcome = await self.fetch(request, emit=emit)
            batch.append(urls[i], outcome)

        logger.info(f"Batch finished: {total - batch.failed} succeeded, {batch.failed} failed")
        return batch


def fetch_blocking(
    url: str,
    on_event: Callable[[FetchEvent], None] | None = None,
    config: PagefetchConfig | None = None,
    **kwargs: object,
) -> FetchOutcome:
    """
    Blocking fetch with optional event callback.

    This is a convenience wrapper for sync code that can't use async/await.
    For async code, use the Fetcher class directly.

    WARNING: Do not call from within an existing event loop (e.g., Jupyter,
    asyncio-based frameworks). Use the async Fetcher API instead.

    Args:
        url: The URL to fetch
        on_event: Optional callback for events (for progress tracking)
        config: Optional configuration
        **kwargs: Additional FetchRequest fields (include_metadata, simplify, timeout_ms)

    Returns:
        FetchSuccess or FetchFailure

    Raises:
        RequestValidationError: If the URL or an option is invalid

    Example:
        outcome = fetch_blocking("https://example.com", include_metadata=True)
        print(outcome.text if outcome.ok else outcome.message)
    """
    # Detect if we're already in an async context
    try:
        asyncio.get_running_loop()
        raise RuntimeError("fetch_blocking() called from async context. Use 'async with Fetcher()' instead.")
    except RuntimeError as e:
        if "no running event loop" not in str(e).lower():
            raise

    config = config or PagefetchConfig()
    kwargs.setdefault("timeout_ms", config.default_timeout_ms)
    request = FetchRequest.build(url=url, **kwargs)

    async def _run() -> FetchOutcome:
        async with Fetcher(config) as fetcher:
            return await fetcher.fetch(request, emit=on_event)

    return asyncio.run(_run())
