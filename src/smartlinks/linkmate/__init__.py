"""Linkmate smart-link payloads, transport and reconciliation."""

from .mapper import LinkMapper, MapperState, map_smart_links
from .payload import DO_NOT_LINK_SUFFIX, LOCK_LINK_SUFFIX, PayloadBuilder
from .transport import MalformedResponseError, SmartLinksClient, parse_smart_links
from .two_steps import TwoStepsResponse

__all__ = [
    "DO_NOT_LINK_SUFFIX",
    "LOCK_LINK_SUFFIX",
    "LinkMapper",
    "MalformedResponseError",
    "MapperState",
    "PayloadBuilder",
    "SmartLinksClient",
    "TwoStepsResponse",
    "map_smart_links",
    "parse_smart_links",
]
