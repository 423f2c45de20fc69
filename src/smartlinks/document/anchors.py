"""Anchor abstraction over parsed HTML elements."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable
from urllib.parse import urljoin

from bs4 import Tag


@runtime_checkable
class Anchor(Protocol):
    """
    A page element with a readable/writable link value.

    Implementations decide where the link lives (an ``href`` attribute,
    a ``data-*`` attribute, a DOM property); callers only see the value.
    """

    def get_link_value(self) -> str: ...

    def set_link_value(self, value: str) -> None: ...


class AttributeAnchor:
    """
    Anchor backed by a BeautifulSoup tag and a fixed attribute name.

    Equality is structural: two anchors are equal when they read the same
    attribute and their tags compare equal (same name, attributes and
    contents), regardless of object identity.

    When a ``base_url`` is given, an ``href`` reads back absolute, the way a
    browser reports it: relative references are resolved against the base.
    Other attributes are returned verbatim.

    Example:
        anchor = AttributeAnchor(soup.a, "href")
        anchor.set_link_value("https://example.com/")
    """

    __slots__ = ("_tag", "_attribute", "_base_url")

    def __init__(self, tag: Tag, attribute: str = "href", base_url: Optional[str] = None):
        self._tag = tag
        self._attribute = attribute
        self._base_url = base_url

    @property
    def tag(self) -> Tag:
        return self._tag

    @property
    def attribute(self) -> str:
        return self._attribute

    def get_link_value(self) -> str:
        value = self._tag.get(self._attribute)
        if value is None:
            return ""
        # Multi-valued attributes (e.g. rel) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        if self._base_url and self._attribute == "href":
            return urljoin(self._base_url, str(value))
        return str(value)

    def set_link_value(self, value: str) -> None:
        self._tag[self._attribute] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeAnchor):
            return NotImplemented
        return self._attribute == other._attribute and self._tag == other._tag

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"AttributeAnchor({self._attribute}={self.get_link_value()!r})"
