"""Tests for the Linkmate transport adapter."""

import json

import pytest

from smartlinks.http.protocols import HttpResponse
from smartlinks.linkmate.transport import MalformedResponseError, SmartLinksClient, parse_smart_links
from smartlinks.models.links import SmartLink


class MockHttpClient:
    """Mock HTTP client recording posts and answering a fixed body."""

    def __init__(self, body: bytes = b"{}", status_code: int = 200):
        self.body = body
        self.status_code = status_code
        self.calls: list[tuple[str, dict, float]] = []

    async def post_json(self, url, payload, *, timeout=None, headers=None):
        self.calls.append((url, payload, timeout))
        return HttpResponse(
            status_code=self.status_code,
            content=self.body,
            content_type="application/json",
            headers={},
            url=url,
        )


def _body(smart_links: list[dict]) -> bytes:
    return json.dumps({"data": [{"smart_links": smart_links}]}).encode()


class TestSmartLinksClient:
    """Tests for SmartLinksClient."""

    def test_publisher_id_substituted(self):
        """Test that the endpoint template receives the publisher id."""
        client = SmartLinksClient(MockHttpClient(), publisher_id=42)
        assert client.endpoint == "https://api.narrativ.com/api/v1/publishers/42/linkmate/smart_links/"

    def test_custom_endpoint(self):
        """Test a custom endpoint template with a string publisher id."""
        client = SmartLinksClient(MockHttpClient(), publisher_id="pub-7", endpoint="https://x.test/.pub_id./links")
        assert client.endpoint == "https://x.test/pub-7/links"

    @pytest.mark.asyncio
    async def test_fetch_smart_links(self):
        """Test posting a payload and reading data[0].smart_links."""
        http = MockHttpClient(
            _body(
                [
                    {"url": "http://a.com", "auction_id": "X1", "merchant": "Shop"},
                    {"url": "http://b.com", "auction_id": 77},
                ]
            )
        )
        client = SmartLinksClient(http, publisher_id=1, timeout=3.0)
        payload = {"article": {"name": None, "url": "https://p.test"}, "links": []}

        smart_links = await client.fetch_smart_links(payload)

        assert smart_links == [
            SmartLink(url="http://a.com", auction_id="X1"),
            SmartLink(url="http://b.com", auction_id="77"),
        ]
        assert smart_links[0].extra == {"merchant": "Shop"}
        assert http.calls == [(client.endpoint, payload, 3.0)]

    @pytest.mark.asyncio
    async def test_empty_smart_links(self):
        """Test that an empty list is not an error."""
        client = SmartLinksClient(MockHttpClient(_body([])), publisher_id=1)
        assert await client.fetch_smart_links({"links": []}) == []

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test that a non-JSON body raises MalformedResponseError."""
        client = SmartLinksClient(MockHttpClient(b"<html>oops</html>"), publisher_id=1)
        with pytest.raises(MalformedResponseError):
            await client.fetch({"links": []})

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self):
        """Test that HTTP client failures are not wrapped."""

        class FailingHttpClient:
            async def post_json(self, url, payload, *, timeout=None, headers=None):
                raise ConnectionError("unreachable")

        client = SmartLinksClient(FailingHttpClient(), publisher_id=1)
        with pytest.raises(ConnectionError):
            await client.fetch_smart_links({"links": []})


class TestParseSmartLinks:
    """Tests for response-shape handling."""

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"data": []},
            {"data": [{}]},
            {"data": {"smart_links": []}},
            {"data": [{"smart_links": None}]},
            {"data": [{"smart_links": [{"url": "http://a.com"}]}]},
            {"data": [{"smart_links": ["http://a.com"]}]},
            [],
            None,
        ],
    )
    def test_malformed_shapes(self, body):
        """Test that every unexpected shape raises MalformedResponseError."""
        with pytest.raises(MalformedResponseError):
            parse_smart_links(body)

    def test_only_first_data_item_is_read(self):
        """Test that later data items are ignored."""
        body = {
            "data": [
                {"smart_links": [{"url": "http://a.com", "auction_id": "A"}]},
                {"smart_links": [{"url": "http://b.com", "auction_id": "B"}]},
            ]
        }
        assert parse_smart_links(body) == [SmartLink(url="http://a.com", auction_id="A")]

    def test_malformed_error_is_value_error(self):
        """Test that callers catching ValueError also catch shape errors."""
        with pytest.raises(ValueError):
            parse_smart_links({"data": []})
