"""Request payload construction for the Linkmate API."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..document.anchors import Anchor
from ..document.page import HtmlPage
from ..models.links import ArticleInfo, LinkRequestItem

# Business-rule markers publishers append to individual links
DO_NOT_LINK_SUFFIX = "#donotlink"
LOCK_LINK_SUFFIX = "#locklink"


class PayloadBuilder:
    """
    Build the ``{"article": ..., "links": [...]}`` request body.

    Links ending in ``#donotlink`` are left out entirely. A link is sent as
    exclusive when the publisher asks for exclusive links globally or the
    link itself ends in ``#locklink``.

    Example:
        builder = PayloadBuilder(exclusive_links=False)
        payload = builder.build(anchors, builder.build_article(page))
    """

    def __init__(self, exclusive_links: bool = False):
        self._exclusive_links = exclusive_links

    @property
    def exclusive_links(self) -> bool:
        return self._exclusive_links

    def build_links(self, anchors: Iterable[Anchor]) -> list[LinkRequestItem]:
        items: list[LinkRequestItem] = []
        for anchor in anchors:
            link = anchor.get_link_value()
            if link.endswith(DO_NOT_LINK_SUFFIX):
                continue
            exclusive = self._exclusive_links or link.endswith(LOCK_LINK_SUFFIX)
            items.append(LinkRequestItem(raw_url=link, exclusive_match_requested=exclusive))
        return items

    @staticmethod
    def build_article(page: HtmlPage) -> ArticleInfo:
        return ArticleInfo(name=page.title, url=page.canonical_url)

    def build(self, anchors: Iterable[Anchor], article: ArticleInfo) -> dict[str, Any]:
        return {
            "article": article.to_dict(),
            "links": [item.to_dict() for item in self.build_links(anchors)],
        }
