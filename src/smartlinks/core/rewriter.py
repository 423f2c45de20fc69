"""Apply smart-link replacements to pages."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from types import TracebackType
from typing import Optional

from ..document.anchors import Anchor
from ..document.page import HtmlPage
from ..http import AsyncHttpClient
from ..linkmate import LinkMapper, PayloadBuilder, SmartLinksClient
from ..models.config import SmartLinksConfig
from ..models.links import ReconciliationResult

logger = logging.getLogger(__name__)


@dataclass
class RewriteReport:
    """
    Outcome of one rewrite pass.

    Attributes:
        anchors_seen: Eligible anchors handed to the mapper
        request_made: Whether the API was queried
        used_stale_response: Whether replacements came from a cached response
            because no fresh mapping was available
        rewritten: (original link, replacement) for every anchor changed
    """

    anchors_seen: int = 0
    request_made: bool = False
    used_stale_response: bool = False
    rewritten: list[tuple[str, str]] = field(default_factory=list)

    @property
    def rewritten_count(self) -> int:
        return len(self.rewritten)

    def to_dict(self) -> dict:
        """Convert report to dictionary for serialization."""
        return {
            "anchors_seen": self.anchors_seen,
            "request_made": self.request_made,
            "used_stale_response": self.used_stale_response,
            "rewritten": [{"original": o, "replacement": r} for o, r in self.rewritten],
        }


def _first_replacements(results: Sequence[ReconciliationResult]) -> dict[int, tuple[Anchor, str]]:
    """First non-null replacement per anchor, keyed by anchor identity."""
    chosen: dict[int, tuple[Anchor, str]] = {}
    for result in results:
        if not result.is_match:
            continue
        chosen.setdefault(id(result.anchor), (result.anchor, result.replacement_url))
    return chosen


class LinkRewriter:
    """
    Write mapper results back onto anchors.

    Links are only written once both halves of the mapper's answer are
    known, so the fresh mapping is computed against the original link
    values. A fresh mapping replaces the stale one entirely.
    """

    def __init__(self, mapper: LinkMapper):
        self._mapper = mapper

    async def rewrite(self, anchors: Sequence[Anchor]) -> RewriteReport:
        report = RewriteReport(anchors_seen=len(anchors))

        result = self._mapper.run(anchors)
        report.request_made = result.async_response is not None

        replacements: dict[int, tuple[Anchor, str]] = {}
        if result.sync_response is not None:
            replacements = _first_replacements(result.sync_response)
            report.used_stale_response = True

        fresh = await result.resolve()
        if fresh is not None:
            replacements = _first_replacements(fresh)
            report.used_stale_response = False

        for anchor, replacement in replacements.values():
            original = anchor.get_link_value()
            anchor.set_link_value(replacement)
            report.rewritten.append((original, replacement))

        logger.info(f"Rewrote {report.rewritten_count} of {report.anchors_seen} anchors")
        return report


class SmartLinkRewriter:
    """
    Primary API: rewrite the anchors of HTML pages to smart links.

    Owns the HTTP session for its lifetime and keeps one LinkMapper per page
    URL, so rewriting the same page again reuses the cached API response.

    Example:
        config = SmartLinksConfig(linkmate={"publisher_id": 123})

        async with SmartLinkRewriter(config) as rewriter:
            page = HtmlPage(html, url="https://blog.example.com/post")
            report = await rewriter.rewrite_page(page)
            print(page.to_html())
    """

    def __init__(self, config: SmartLinksConfig):
        self.config = config
        self._http_client: AsyncHttpClient | None = None
        self._client: SmartLinksClient | None = None
        self._payload_builder = PayloadBuilder(exclusive_links=config.linkmate.exclusive_links)
        self._mappers: dict[str, LinkMapper] = {}

    async def __aenter__(self) -> SmartLinkRewriter:
        """Enter async context and initialize components."""
        network = self.config.network
        self._http_client = AsyncHttpClient(
            user_agent=network.user_agent,
            proxy=network.proxy,
            default_timeout=network.timeout,
        )
        await self._http_client.__aenter__()

        self._client = SmartLinksClient(
            self._http_client,
            publisher_id=self.config.linkmate.publisher_id,
            endpoint=self.config.linkmate.endpoint,
            timeout=network.timeout,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and cleanup resources."""
        if self._http_client:
            await self._http_client.__aexit__(exc_type, exc_val, exc_tb)
            self._http_client = None
        self._client = None

    def _mapper_for(self, page: HtmlPage) -> LinkMapper:
        if self._client is None:
            raise RuntimeError("Rewriter not initialized. Use 'async with' context manager.")

        mapper = self._mappers.get(page.url)
        if mapper is None:
            mapper = LinkMapper(
                self._client,
                self._payload_builder,
                self._payload_builder.build_article(page),
                redirect_template=self.config.linkmate.redirect_template,
            )
            self._mappers[page.url] = mapper
        return mapper

    async def rewrite_page(self, page: HtmlPage) -> RewriteReport:
        """
        Rewrite the page's anchors in place.

        Args:
            page: Parsed page; its anchors are modified

        Returns:
            RewriteReport describing what changed
        """
        linkmate = self.config.linkmate
        anchors = page.anchors(link_attribute=linkmate.link_attribute, selector=linkmate.link_selector)
        return await LinkRewriter(self._mapper_for(page)).rewrite(anchors)


def rewrite_blocking(
    html: str,
    url: str,
    config: Optional[SmartLinksConfig] = None,
    **kwargs: object,
) -> tuple[str, RewriteReport]:
    """
    Blocking rewrite of a single HTML document.

    This is a convenience wrapper for sync code that can't use async/await.
    For async code, use the SmartLinkRewriter class directly.

    WARNING: Do not call from within an existing event loop. Use the async
    SmartLinkRewriter API instead.

    Args:
        html: Page HTML
        url: Page URL
        config: Full configuration (built from kwargs if None)
        **kwargs: Config options passed to SmartLinksConfig

    Returns:
        Tuple of (rewritten HTML, report)

    Example:
        html, report = rewrite_blocking(
            page_html,
            "https://blog.example.com/post",
            linkmate={"publisher_id": 123},
        )
    """
    # Detect if we're already in an async context
    try:
        asyncio.get_running_loop()
        raise RuntimeError("rewrite_blocking() called from async context. Use 'async with SmartLinkRewriter()' instead.")
    except RuntimeError as e:
        if "no running event loop" not in str(e).lower():
            raise

    if config is None:
        config = SmartLinksConfig(**kwargs)  # type: ignore[arg-type]

    async def _run() -> tuple[str, RewriteReport]:
        page = HtmlPage(html, url)
        async with SmartLinkRewriter(config) as rewriter:
            report = await rewriter.rewrite_page(page)
        return page.to_html(), report

    return asyncio.run(_run())
