"""Smartlinks configuration and link models."""

from .config import (
    DEFAULT_LINKMATE_ENDPOINT,
    DEFAULT_REDIRECT_TEMPLATE,
    LinkmateConfig,
    NetworkConfig,
    SmartLinksConfig,
)
from .links import ArticleInfo, LinkRequestItem, ReconciliationResult, SmartLink

__all__ = [
    # Config
    "DEFAULT_LINKMATE_ENDPOINT",
    "DEFAULT_REDIRECT_TEMPLATE",
    "LinkmateConfig",
    "NetworkConfig",
    "SmartLinksConfig",
    # Links
    "ArticleInfo",
    "LinkRequestItem",
    "ReconciliationResult",
    "SmartLink",
]
