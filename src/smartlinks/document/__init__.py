"""Page and anchor abstractions."""

from .anchors import Anchor, AttributeAnchor
from .page import HtmlPage

__all__ = ["Anchor", "AttributeAnchor", "HtmlPage"]
