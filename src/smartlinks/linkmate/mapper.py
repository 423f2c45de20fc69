"""Reconcile Linkmate smart links with the anchors on a page."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from ..document.anchors import Anchor
from ..models.config import AUCTION_ID_PLACEHOLDER, DEFAULT_REDIRECT_TEMPLATE
from ..models.links import ArticleInfo, ReconciliationResult, SmartLink
from .payload import PayloadBuilder
from .transport import SmartLinksClient
from .two_steps import TwoStepsResponse

logger = logging.getLogger(__name__)

MappedLinks = list[ReconciliationResult]


def map_smart_links(
    smart_links: Sequence[SmartLink],
    anchors: Sequence[Anchor],
    redirect_template: str = DEFAULT_REDIRECT_TEMPLATE,
) -> MappedLinks:
    """
    Pair every smart link with every anchor.

    The API returns each unique link once; this spreads it over every anchor
    that points at it. Results are ordered smart link first, then anchor,
    giving exactly ``len(smart_links) * len(anchors)`` entries.

    Args:
        smart_links: Smart links in response order
        anchors: Anchors in document order
        redirect_template: Redirect URL; every ``{auction_id}`` is replaced,
            other text (braces included) is kept as is

    Returns:
        One ReconciliationResult per pair; ``replacement_url`` is set only
        when the anchor's link equals the smart link's URL exactly
    """
    return [
        ReconciliationResult(
            anchor=anchor,
            replacement_url=(
                redirect_template.replace(AUCTION_ID_PLACEHOLDER, smart_link.auction_id)
                if anchor.get_link_value() == smart_link.url
                else None
            ),
        )
        for smart_link in smart_links
        for anchor in anchors
    ]


@dataclass
class MapperState:
    """
    Cached API response and the anchors it was requested for.

    ``response`` and ``anchors`` only change together, after a successful
    request. ``issued`` counts requests started so late responses can be
    recognized.
    """

    response: Optional[list[SmartLink]] = None
    anchors: Optional[list[Anchor]] = None
    issued: int = 0


class LinkMapper:
    """
    Keep a page's anchors in sync with the smart-link API.

    Each call to ``run`` decides, from the cached response and the anchors
    it was built for, whether to answer from cache, ask the API again, or
    both.

    Example:
        mapper = LinkMapper(client, PayloadBuilder(), article)
        result = mapper.run(page.anchors())
        fresh = await result.resolve()
    """

    def __init__(
        self,
        client: SmartLinksClient,
        payload_builder: PayloadBuilder,
        article: ArticleInfo,
        redirect_template: str = DEFAULT_REDIRECT_TEMPLATE,
    ):
        """
        Initialize the mapper.

        Args:
            client: Transport used to query the API
            payload_builder: Builds request bodies from anchors
            article: Article section sent with every request
            redirect_template: Redirect URL with an ``{auction_id}`` placeholder
        """
        self._client = client
        self._payload_builder = payload_builder
        self._article = article
        self._redirect_template = redirect_template
        self._state = MapperState()

    @property
    def state(self) -> MapperState:
        return self._state

    def run(self, anchors: Sequence[Anchor]) -> TwoStepsResponse[MappedLinks]:
        """
        Map anchors to replacement URLs.

        Must be called with a running event loop: the API request, when one
        is needed, is started as a task before this method returns.

        - Anchors changed since the cached response: the cached response is
          mapped against the new anchors right away and a new request is
          started.
        - No cached response yet: a request is started, no immediate answer.
        - Anchors unchanged: no request, no immediate answer.

        Args:
            anchors: Current eligible anchors, in document order

        Returns:
            TwoStepsResponse whose async half resolves to the fresh mapping,
            or to None if a newer request superseded this one
        """
        current = list(anchors)
        state = self._state
        changed = state.anchors is not None and state.anchors != current

        sync_mapped: Optional[MappedLinks] = None
        if state.response is not None and changed:
            sync_mapped = map_smart_links(state.response, current, self._redirect_template)
            logger.debug(f"Mapped {len(current)} changed anchors against cached response")

        if state.response is None or changed:
            loop = asyncio.get_running_loop()
            state.issued += 1
            task = loop.create_task(self._refresh(current, state.issued))
            return TwoStepsResponse(sync_mapped, task)

        state.anchors = current
        return TwoStepsResponse(sync_mapped)

    async def _refresh(self, anchors: list[Anchor], sequence: int) -> Optional[MappedLinks]:
        payload = self._payload_builder.build(anchors, self._article)
        logger.debug(f"Requesting smart links (request #{sequence}, {len(payload['links'])} links)")

        smart_links = await self._client.fetch_smart_links(payload)

        if sequence != self._state.issued:
            logger.debug(f"Discarding response #{sequence}; request #{self._state.issued} is newer")
            return None

        self._state.response = smart_links
        self._state.anchors = anchors
        return map_smart_links(smart_links, anchors, self._redirect_template)
