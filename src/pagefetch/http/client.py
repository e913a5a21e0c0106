"""Async HTTP client used as the transport for the fetch pipeline."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

import aiohttp
from charset_normalizer import from_bytes as detect_encoding

from ..errors import NoResponseError, TransportError
from ..models.config import NetworkConfig
from .protocols import HttpResponse

logger = logging.getLogger(__name__)


class AsyncHttpClient:
    """
    Async HTTP client for one-at-a-time page fetches.

    Features:
    - Redirects followed up to a fixed hop count
    - Content size limits to prevent memory exhaustion
    - Intelligent encoding detection
    - Timeout controls

    Failed requests are never retried; aiohttp exceptions are translated
    into TransportError / NoResponseError with a readable message.

    Example:
        async with AsyncHttpClient() as client:
            response = await client.get("https://example.com", timeout=10.0)
            print(client.decode_content(response))
    """

    def __init__(
        self,
        network: NetworkConfig | None = None,
        default_timeout: float = 30.0,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            network: Header, redirect and size settings
            default_timeout: Default request timeout in seconds
        """
        self._network = network or NetworkConfig()
        self._default_timeout = default_timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        connector = aiohttp.TCPConnector(
            limit=1,  # One in-flight connection at a time
            ttl_dns_cache=300,
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            headers=self._network.request_headers(),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _decode_content(self, content: bytes, content_type: str) -> str:
        """
        Turn a response body into text.

        Tried in order: the charset declared in Content-Type, strict UTF-8,
        charset-normalizer detection, and finally UTF-8 with replacement
        characters. Never raises.

        Args:
            content: Response body
            content_type: Content-Type header value (may be empty)

        Returns:
            Page text
        """
        encoding = None
        if content_type:
            for part in content_type.split(";"):
                part = part.strip()
                if part.lower().startswith("charset="):
                    encoding = part.split("=", 1)[1].strip().strip("\"'")
                    break

        if encoding:
            try:
                return content.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Failed to decode with declared encoding: {encoding}")

        try:
            return content.decode("utf-8")
        except UnicodeDecodeError:
            pass

        best_match = detect_encoding(content).best()
        if best_match is not None:
            logger.debug(f"Detected encoding: {best_match.encoding}")
            return str(best_match)

        return content.decode("utf-8", errors="replace")

    async def get(
        self,
        url: str,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP GET request.

        Args:
            url: The URL to fetch
            timeout: Request timeout in seconds (uses default if None)
            headers: Optional additional headers

        Returns:
            HttpResponse for any status code

        Raises:
            TransportError: Connection, DNS, timeout, redirect or size problems
            NoResponseError: Server closed the connection without answering
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        timeout_val = timeout or self._default_timeout
        max_size = self._network.max_content_size

        try:
            async with self._session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=timeout_val),
                headers=headers,
                allow_redirects=True,
                max_redirects=self._network.max_redirects,
            ) as response:
                content_length = response.headers.get("Content-Length")
                if content_length and content_length.isdigit() and int(content_length) > max_size:
                    raise TransportError(f"Content too large: {content_length} bytes")

                content = b""
                async for chunk in response.content.iter_chunked(8192):
                    content += chunk
                    if len(content) > max_size:
                        raise TransportError(f"Content size limit exceeded: >{max_size} bytes")

                logger.debug(f"GET {url} -> {response.status} ({len(content)} bytes)")

                return HttpResponse(
                    status_code=response.status,
                    content=content,
                    content_type=response.headers.get("Content-Type", ""),
                    reason=response.reason or "",
                    headers=dict(response.headers),
                    url=str(response.url),
                )

        except asyncio.TimeoutError as e:
            raise TransportError(f"timeout of {int(timeout_val * 1000)}ms exceeded") from e
        except aiohttp.TooManyRedirects as e:
            raise TransportError(f"Maximum number of redirects exceeded ({self._network.max_redirects})") from e
        except aiohttp.ServerDisconnectedError as e:
            raise NoResponseError() from e
        except aiohttp.InvalidURL as e:
            raise TransportError(f"Invalid URL: {e.url}") from e
        except aiohttp.ClientError as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

    def decode_content(self, response: HttpResponse) -> str:
        """Decode a response body to text (see _decode_content for the charset order)."""
        return self._decode_content(response.content, response.content_type)
