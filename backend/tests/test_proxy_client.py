"""
NASA Explorer Client — Proxy Client Tests
==========================================

What:  ProxyClient against scripted proxy responses (httpx.MockTransport).

What we test:
    ✅ Search pages: items, numeric total_hits, non-numeric total_hits ignored
    ✅ Error bodies: `message` preferred over `error`, default otherwise
    ✅ APOD envelope: ok flag decides success
    ✅ Connection failures become TransportError
    ✅ Result items: stable keys and display defaults
"""

import httpx
import pytest

from explorer.client.gateway import numeric_total_hits
from explorer.client.items import to_search_items
from explorer.client.proxy import DEFAULT_APOD_ERROR, DEFAULT_SEARCH_ERROR, ProxyClient
from explorer.exceptions import TransportError, UpstreamError
from explorer.schemas.nasa import ApodRecord, NasaImageItem


def make_proxy(handler) -> ProxyClient:
    return ProxyClient(base_url="http://proxy.test", transport=httpx.MockTransport(handler))


class TestSearchImages:

    @pytest.mark.asyncio
    async def test_page_parsed(self, galaxy_payload):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=galaxy_payload)

        page = await make_proxy(handler).search_images("galaxy", 3)

        assert page.page == 3
        assert page.total_hits == 1
        assert page.items[0].data[0].nasa_id == "G1"
        assert seen[0].url.path == "/api/images"
        assert seen[0].url.params["query"] == "galaxy"
        assert seen[0].url.params["page"] == "3"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("total_hits", ["12", None, True, "NaN", {"value": 3}])
    async def test_non_numeric_total_hits_ignored(self, total_hits):
        payload = {"collection": {"items": [], "metadata": {"total_hits": total_hits}}}

        page = await make_proxy(lambda request: httpx.Response(200, json=payload)).search_images("x")

        assert page.total_hits is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"message": "Upstream said no", "error": "ignored"}, "Upstream said no"),
            ({"ok": False, "error": "NASA Image API error: 500 Internal Server Error"},
             "NASA Image API error: 500 Internal Server Error"),
            ({"ok": False}, DEFAULT_SEARCH_ERROR),
        ],
    )
    async def test_error_message_extraction(self, body, expected):
        proxy = make_proxy(lambda request: httpx.Response(502, json=body))

        with pytest.raises(UpstreamError) as exc_info:
            await proxy.search_images("galaxy")

        assert exc_info.value.message == expected
        assert exc_info.value.upstream_status == 502

    @pytest.mark.asyncio
    async def test_error_without_json_body(self):
        proxy = make_proxy(lambda request: httpx.Response(500, text="Internal Server Error"))

        with pytest.raises(UpstreamError) as exc_info:
            await proxy.search_images("galaxy")

        assert exc_info.value.message == DEFAULT_SEARCH_ERROR

    @pytest.mark.asyncio
    async def test_malformed_success_body(self):
        proxy = make_proxy(lambda request: httpx.Response(200, json={"items": []}))

        with pytest.raises(UpstreamError, match="unreadable response"):
            await proxy.search_images("galaxy")

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            await make_proxy(handler).search_images("galaxy")

        assert exc_info.value.message == "Network error. Please try again."


class TestGetApod:

    @pytest.mark.asyncio
    async def test_single_record(self, apod_record):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True, "data": apod_record})

        data = await make_proxy(handler).get_apod(date="2024-01-01")

        assert isinstance(data, ApodRecord)
        assert data.date == "2024-01-01"
        assert seen[0].url.params["date"] == "2024-01-01"

    @pytest.mark.asyncio
    async def test_ok_false_with_success_status(self):
        proxy = make_proxy(lambda request: httpx.Response(200, json={"ok": False, "error": "Nope"}))

        with pytest.raises(UpstreamError, match="Nope"):
            await proxy.get_apod(date="2024-01-01")

    @pytest.mark.asyncio
    async def test_unreadable_body(self):
        proxy = make_proxy(lambda request: httpx.Response(500, text="<html>"))

        with pytest.raises(UpstreamError) as exc_info:
            await proxy.get_apod(date="2024-01-01")

        assert exc_info.value.message == DEFAULT_APOD_ERROR


class TestNumericTotalHits:

    @pytest.mark.parametrize(
        "value, expected",
        [(5, 5), (0, 0), (7.0, 7), ("5", None), (None, None), (False, None),
         (float("inf"), None), (float("nan"), None)],
    )
    def test_values(self, value, expected):
        assert numeric_total_hits(value) == expected


class TestSearchItems:

    def test_keys_and_defaults(self):
        items = [
            NasaImageItem.model_validate(
                {"data": [{"nasa_id": "A1", "title": "Alpha", "description": "d"}],
                 "links": [{"href": "thumb-a"}, {"href": "other"}]}
            ),
            NasaImageItem.model_validate({"data": [{"title": ""}]}),
            NasaImageItem.model_validate({}),
            NasaImageItem.model_validate(
                {"data": [{"nasa_id": "D4"}], "links": [{"rel": "preview", "render": "image"}]}
            ),
        ]

        result = to_search_items(items, page=2)

        assert [item.key for item in result] == ["A1", "page-2-item-1", "page-2-item-2", "D4"]
        assert result[0].thumbnail_url == "thumb-a"
        assert result[0].description == "d"
        assert result[1].title == "Untitled image"
        assert result[2].thumbnail_url is None
        assert result[3].thumbnail_url is None
