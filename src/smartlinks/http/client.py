"""Async HTTP client for JSON APIs."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import aiohttp

from .. import __version__
from .protocols import HttpResponse

logger = logging.getLogger(__name__)


class AsyncHttpClient:
    """
    Async HTTP client for posting JSON payloads.

    Features:
    - Single attempt per request (callers decide whether to try again)
    - Non-2xx statuses raised as aiohttp.ClientResponseError
    - Content size limits to prevent memory exhaustion
    - Timeout controls

    Example:
        client = AsyncHttpClient(default_timeout=5.0)

        async with client:
            response = await client.post_json("https://api.example.com", {"a": 1})
            print(response.json())
    """

    MAX_CONTENT_SIZE = 5 * 1024 * 1024  # 5 MB

    def __init__(
        self,
        max_content_size: int = MAX_CONTENT_SIZE,
        user_agent: str | None = None,
        proxy: str | None = None,
        default_timeout: float = 10.0,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            max_content_size: Maximum response size in bytes
            user_agent: Custom User-Agent string
            proxy: Proxy URL (http:// or socks5://)
            default_timeout: Default request timeout in seconds
        """
        self._max_content_size = max_content_size
        self._proxy = proxy
        self._default_timeout = default_timeout

        if user_agent is None:
            user_agent = f"smartlinks/{__version__}"
        self._user_agent = user_agent

        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(
            headers={"User-Agent": self._user_agent},
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

    async def post_json(
        self,
        url: str,
        payload: Any,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        POST a JSON body and return the raw response.

        Args:
            url: The URL to post to
            payload: JSON-serializable request body
            timeout: Request timeout in seconds (uses default if None)
            headers: Optional additional headers

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            aiohttp.ClientResponseError: On non-2xx status
            aiohttp.ClientError: On network errors
            asyncio.TimeoutError: When the request exceeds the timeout
            ValueError: On content size exceeded
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        timeout_val = timeout or self._default_timeout
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        async with self._session.post(
            url,
            json=payload,
            timeout=aiohttp.ClientTimeout(total=timeout_val),
            headers=request_headers,
            proxy=self._proxy,
        ) as response:
            if response.status >= 400:
                logger.warning(f"Got {response.status} for POST {url}")
            response.raise_for_status()

            # Check Content-Length if available
            content_length = response.headers.get("Content-Length")
            if content_length and int(content_length) > self._max_content_size:
                raise ValueError(f"Content too large: {content_length} bytes")

            # Read content with size limit
            content = b""
            async for chunk in response.content.iter_chunked(8192):
                content += chunk
                if len(content) > self._max_content_size:
                    raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")

            logger.debug(f"POST {url} -> {response.status} ({len(content)} bytes)")

            return HttpResponse(
                status_code=response.status,
                content=content,
                content_type=response.headers.get("Content-Type", ""),
                headers=dict(response.headers),
                url=str(response.url),
            )
