"""Base classes for the fetch pipeline architecture."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, runtime_checkable

from ..errors import PagefetchError
from ..models.events import EventType, FetchEvent
from ..models.request import FetchRequest
from ..models.results import ExtractedArticle, FetchFailure, FetchOutcome, FetchSuccess

logger = logging.getLogger(__name__)

# Type alias for event emitter function
EventEmitter = Callable[[FetchEvent], None]

DEFAULT_ERROR_MESSAGE = "Failed to fetch URL"


@dataclass
class PageContext:
    """
    Context object passed through pipeline steps.

    Contains all state for processing a single page, accumulated
    as it moves through the pipeline.

    Attributes:
        request: The fetch request being processed
        html: Decoded HTML of the response body
        article: Extracted main content, if extraction ran and succeeded
        markdown: Converted markdown body
        metadata: Ordered metadata (front matter entries)
        text: Final assembled document
        error: Error message if a step failed
    """

    request: FetchRequest

    # Content (accumulated through pipeline)
    html: Optional[str] = None
    article: Optional[ExtractedArticle] = None
    markdown: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None

    # Status
    error: Optional[str] = None

    @property
    def url(self) -> str:
        return self.request.url

    def to_outcome(self) -> FetchOutcome:
        """Collapse the context into a success or failure outcome."""
        if self.error is not None:
            return FetchFailure(message=self.error)
        if self.text is None:
            return FetchFailure(message="No content produced")
        return FetchSuccess(text=self.text)


@runtime_checkable
class FetchStep(Protocol):
    """
    Protocol for pipeline steps.

    Each step receives a PageContext, processes it, and returns
    the (possibly modified) context.

    Error Handling Contract:
    - Steps that do not apply to a request (e.g. metadata when it was
      not requested) return the context unchanged
    - For failures: raise an exception, preferably a PagefetchError
    - The pipeline will catch exceptions and set ctx.error

    Example implementation:
        class UppercaseStep:
            name = "uppercase"

            async def execute(
                self,
                ctx: PageContext,
                emit: Optional[EventEmitter] = None
            ) -> PageContext:
                ctx.markdown = (ctx.markdown or "").upper()
                return ctx
    """

    name: str

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute this pipeline step.

        Args:
            ctx: The page context with accumulated state
            emit: Optional callback to emit events

        Returns:
            The (possibly modified) page context
        """
        ...


def error_message(error: Exception) -> str:
    """Human-readable message for an exception caught at the pipeline boundary."""
    return str(error) or DEFAULT_ERROR_MESSAGE


@dataclass
class FetchPipeline:
    """
    Pipeline for processing a single page through multiple steps.

    Steps are executed in order. If a step raises an exception, the
    error message is captured in ctx.error and processing stops; the
    exception never escapes execute().

    Example:
        pipeline = FetchPipeline(steps=[
            FetchStep(http_client),
            ExtractStep(extractor),
            ConvertStep(converter),
            MetadataStep(harvester),
            FormatStep(),
        ])

        ctx = await pipeline.execute(request, emit=log_event)
        outcome = ctx.to_outcome()
    """

    steps: list[FetchStep]

    async def execute(
        self,
        request: FetchRequest,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the pipeline for a request.

        Args:
            request: The validated fetch request
            emit: Optional callback for emitting events

        Returns:
            PageContext with final state (check error for status)
        """
        ctx = PageContext(request=request)

        for step in self.steps:
            try:
                ctx = await step.execute(ctx, emit)
            except Exception as e:
                ctx.error = error_message(e)
                if isinstance(e, PagefetchError):
                    logger.info(f"{step.name} failed for {request.url}: {ctx.error}")
                else:
                    logger.exception(f"Unexpected error in {step.name} step for {request.url}")

                # Emit failure event
                if emit:
                    emit(
                        FetchEvent(
                            type=EventType.FETCH_FAILED,
                            url=request.url,
                            error=ctx.error,
                        )
                    )
                break

        return ctx
