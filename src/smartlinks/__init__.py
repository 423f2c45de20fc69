"""
smartlinks - Rewrite page anchors to Linkmate smart links.

Usage:
    from smartlinks import HtmlPage, SmartLinkRewriter, SmartLinksConfig

    config = SmartLinksConfig(linkmate={"publisher_id": 123})

    async with SmartLinkRewriter(config) as rewriter:
        page = HtmlPage(html, url="https://blog.example.com/post")
        report = await rewriter.rewrite_page(page)
        print(page.to_html())
"""

__version__ = "0.1.0"

from .core.rewriter import LinkRewriter, RewriteReport, SmartLinkRewriter, rewrite_blocking
from .document import Anchor, AttributeAnchor, HtmlPage
from .linkmate import (
    LinkMapper,
    MalformedResponseError,
    PayloadBuilder,
    SmartLinksClient,
    TwoStepsResponse,
    map_smart_links,
)
from .models.config import LinkmateConfig, NetworkConfig, SmartLinksConfig
from .models.links import ArticleInfo, LinkRequestItem, ReconciliationResult, SmartLink

__all__ = [
    "__version__",
    # Core
    "SmartLinkRewriter",
    "LinkRewriter",
    "RewriteReport",
    "rewrite_blocking",
    # Document
    "Anchor",
    "AttributeAnchor",
    "HtmlPage",
    # Linkmate
    "LinkMapper",
    "MalformedResponseError",
    "PayloadBuilder",
    "SmartLinksClient",
    "TwoStepsResponse",
    "map_smart_links",
    # Config
    "SmartLinksConfig",
    "LinkmateConfig",
    "NetworkConfig",
    # Links
    "ArticleInfo",
    "LinkRequestItem",
    "ReconciliationResult",
    "SmartLink",
]
