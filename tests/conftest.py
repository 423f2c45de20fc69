"""Shared fixtures for smartlinks tests."""

import asyncio
from typing import Optional

import pytest
from bs4 import BeautifulSoup

from smartlinks.document.anchors import AttributeAnchor
from smartlinks.models.links import ArticleInfo


def make_anchors(*hrefs: str, attribute: str = "href") -> list[AttributeAnchor]:
    """Build anchors backed by real tags, one per link value."""
    html = "".join(f'<a {attribute}="{href}">link {i}</a>' for i, href in enumerate(hrefs))
    soup = BeautifulSoup(html, "html.parser")
    return [AttributeAnchor(tag, attribute) for tag in soup.find_all("a")]


class ControlledClient:
    """
    Stand-in for SmartLinksClient whose responses are released by the test.

    Every call parks on a fresh future; tests resolve them in any order.
    """

    def __init__(self):
        self.payloads: list[dict] = []
        self.futures: list[asyncio.Future] = []

    async def fetch_smart_links(self, payload):
        future = asyncio.get_running_loop().create_future()
        self.payloads.append(payload)
        self.futures.append(future)
        return await future


class StaticClient:
    """Stand-in for SmartLinksClient that always answers the same smart links."""

    def __init__(self, smart_links=None, error: Optional[Exception] = None):
        self.smart_links = smart_links or []
        self.error = error
        self.payloads: list[dict] = []

    async def fetch_smart_links(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return list(self.smart_links)


@pytest.fixture
def article():
    return ArticleInfo(name="Best Blenders of the Year", url="https://blog.example.com/blenders")
