"""Transport adapter for the Linkmate smart-links endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from ..http.protocols import HttpClient
from ..models.config import DEFAULT_LINKMATE_ENDPOINT, PUBLISHER_ID_PLACEHOLDER
from ..models.links import SmartLink

logger = logging.getLogger(__name__)


class MalformedResponseError(ValueError):
    """The API answered with a body that is not ``{"data": [{"smart_links": [...]}]}``."""


class SmartLinksClient:
    """
    POST link payloads to the Linkmate API and read back smart links.

    The client makes exactly one request per call. Transport failures
    (network errors, timeouts, non-2xx statuses) propagate unchanged.

    Example:
        client = SmartLinksClient(http_client, publisher_id=123)
        smart_links = await client.fetch_smart_links(payload)
    """

    def __init__(
        self,
        http_client: HttpClient,
        publisher_id: Union[int, str],
        endpoint: str = DEFAULT_LINKMATE_ENDPOINT,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            http_client: HTTP client used for the POST
            publisher_id: Publisher identifier substituted into the endpoint
            endpoint: Endpoint template containing '.pub_id.'
            timeout: Per-request timeout (HTTP client default if None)
        """
        self._http = http_client
        self._endpoint = endpoint.replace(PUBLISHER_ID_PLACEHOLDER, str(publisher_id))
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def fetch(self, payload: dict[str, Any]) -> Any:
        """
        POST the payload and return the decoded JSON body.

        Raises:
            MalformedResponseError: If the body is not valid JSON
        """
        logger.debug(f"Posting {len(payload.get('links', []))} links to {self._endpoint}")
        response = await self._http.post_json(self._endpoint, payload, timeout=self._timeout)
        try:
            return response.json()
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedResponseError(f"Response from {self._endpoint} is not valid JSON: {e}") from e

    async def fetch_smart_links(self, payload: dict[str, Any]) -> list[SmartLink]:
        """
        POST the payload and extract ``data[0].smart_links``.

        Returns:
            Smart links in response order (possibly empty)

        Raises:
            MalformedResponseError: If the expected field path is missing
        """
        body = await self.fetch(payload)
        return parse_smart_links(body)


def parse_smart_links(body: Any) -> list[SmartLink]:
    """
    Read the smart-link list out of a decoded response body.

    Raises:
        MalformedResponseError: If ``data[0].smart_links`` cannot be read
    """
    try:
        items = body["data"][0]["smart_links"]
        smart_links = [SmartLink.from_dict(item) for item in items]
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        logger.warning(f"Unexpected smart-links response shape: {e!r}")
        raise MalformedResponseError(f"Cannot read data[0].smart_links from response: {e!r}") from e

    logger.debug(f"Received {len(smart_links)} smart links")
    return smart_links
