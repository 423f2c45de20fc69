"""Request and response records exchanged with the Linkmate API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..document.anchors import Anchor


@dataclass(frozen=True)
class LinkRequestItem:
    """
    One entry of the ``links`` array sent to the API.

    Attributes:
        raw_url: The anchor's link value, exactly as read from the page
        exclusive_match_requested: Ask that the link not be shared with competing advertisers
    """

    raw_url: str
    exclusive_match_requested: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw_url": self.raw_url,
            "exclusive_match_requested": self.exclusive_match_requested,
        }


@dataclass(frozen=True)
class ArticleInfo:
    """Article section of the payload: page title (or None) and page URL."""

    name: Optional[str]
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True)
class SmartLink:
    """
    Canonical link returned by the API.

    Only ``url`` and ``auction_id`` are interpreted; every other field the
    API sends is kept untouched in ``extra``.
    """

    url: str
    auction_id: str
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SmartLink:
        """
        Build a SmartLink from one item of ``data[0].smart_links``.

        Raises:
            KeyError: If ``url`` or ``auction_id`` is missing
            TypeError: If ``data`` is not a mapping
        """
        extra = {k: v for k, v in data.items() if k not in ("url", "auction_id")}
        return cls(url=data["url"], auction_id=str(data["auction_id"]), extra=extra)


@dataclass(frozen=True)
class ReconciliationResult:
    """Replacement URL computed for one (smart link, anchor) pair."""

    anchor: Anchor
    replacement_url: Optional[str] = None

    @property
    def is_match(self) -> bool:
        return self.replacement_url is not None
