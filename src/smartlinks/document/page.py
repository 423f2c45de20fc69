"""Parsed HTML page acting as the anchor host."""

import logging
from typing import Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .anchors import AttributeAnchor

logger = logging.getLogger(__name__)


class HtmlPage:
    """
    An HTML document whose anchors can be collected and rewritten in place.

    Example:
        page = HtmlPage(html, url="https://blog.example.com/post")
        anchors = page.anchors(link_attribute="href")
        ...
        rewritten_html = page.to_html()
    """

    def __init__(self, html: Union[str, bytes], url: str, parser: str = "html.parser"):
        """
        Parse the page.

        Args:
            html: Raw HTML content
            url: The URL the page was served from
            parser: BeautifulSoup parser name
        """
        self._url = url
        self._soup = BeautifulSoup(html, parser)

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    @property
    def url(self) -> str:
        return self._url

    @property
    def base_url(self) -> str:
        """Base for relative links: ``<base href>`` resolved against the page URL, else the page URL."""
        base = self._soup.find("base", href=True)
        if base is not None:
            return urljoin(self._url, base["href"])
        return self._url

    @property
    def title(self) -> Optional[str]:
        """Document title, or None when absent or blank."""
        title_tag = self._soup.title
        if title_tag is None:
            return None
        text = title_tag.get_text().strip()
        return text or None

    @property
    def canonical_url(self) -> str:
        """
        URL identifying the article.

        Uses ``<link rel="canonical">`` when the page declares one, resolved
        against the base URL; otherwise the page URL itself.
        """
        for link in self._soup.find_all("link", href=True):
            rel = link.get("rel") or []
            if isinstance(rel, str):
                rel = rel.split()
            if "canonical" in (r.lower() for r in rel):
                return urljoin(self.base_url, link["href"])
        return self._url

    def anchors(self, link_attribute: str = "href", selector: str = "a") -> list[AttributeAnchor]:
        """
        Collect eligible anchors in document order.

        Args:
            link_attribute: Attribute holding each anchor's link
            selector: CSS selector for candidate elements

        Returns:
            Anchors matching ``selector`` that carry ``link_attribute``;
            ``href`` values read back resolved against :attr:`base_url`
        """
        base_url = self.base_url
        found = [
            AttributeAnchor(tag, link_attribute, base_url=base_url)
            for tag in self._soup.select(selector)
            if tag.has_attr(link_attribute)
        ]
        logger.debug(f"Collected {len(found)} anchors with '{link_attribute}' from {self._url}")
        return found

    def to_html(self) -> str:
        return str(self._soup)
