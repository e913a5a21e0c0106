"""FetchStep - HTTP fetching pipeline step."""

import logging
from typing import Optional

from ...errors import HttpStatusError
from ...http.protocols import HttpClient
from ...models.events import EventType, FetchEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class FetchStep:
    """
    Pipeline step that fetches page content via HTTP.

    Populates:
        ctx.html: Decoded response body

    Raises:
        HttpStatusError: Response status is 400 or above
        TransportError / NoResponseError: From the HTTP client

    Example:
        async with AsyncHttpClient() as http_client:
            fetch_step = FetchStep(http_client)
            ctx = await fetch_step.execute(ctx)
            html_content = ctx.html
    """

    name = "fetch"

    def __init__(self, http_client: HttpClient) -> None:
        """
        Initialize the fetch step.

        Args:
            http_client: HTTP client implementing HttpClient protocol
        """
        self._client = http_client

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the fetch step.

        Args:
            ctx: Page context with the request to fetch
            emit: Optional callback to emit events

        Returns:
            PageContext with html populated
        """
        url = ctx.url

        if emit:
            emit(
                FetchEvent(
                    type=EventType.FETCH_STARTED,
                    url=url,
                    message=f"Fetching {url}",
                )
            )

        response = await self._client.get(url, timeout=ctx.request.timeout_seconds)

        if response.status_code >= 400:
            logger.debug(f"HTTP {response.status_code} for {url}")
            raise HttpStatusError(response.status_code, response.reason)

        ctx.html = self._client.decode_content(response)

        logger.debug(f"Fetched {url}: {len(response.content)} bytes")

        if emit:
            emit(
                FetchEvent(
                    type=EventType.FETCH_COMPLETED,
                    url=url,
                    status_code=response.status_code,
                    bytes_downloaded=len(response.content),
                    content_type=response.content_type,
                    message=f"Fetched {len(response.content)} bytes",
                )
            )

        return ctx
