"""
NASA Explorer Backend — Image Search and Health Route Tests
============================================================

What we test:
    ✅ GET /api/images forwards query/page and returns the collection as-is
    ✅ Invalid page values fall back to 1
    ✅ Blank query → 400 before any upstream call
    ✅ Upstream failures → 502 {ok: false, error}
    ✅ A link without href does not fail the page
    ✅ GET /health reports credential state without calling NASA
"""

import httpx
import pytest

from explorer import __version__
from explorer.config import settings


class TestImageSearch:

    @pytest.mark.asyncio
    async def test_search_returns_collection(self, test_client, mock_nasa, galaxy_payload):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=galaxy_payload)

        mock_nasa(handler)

        response = await test_client.get("/api/images", params={"query": " galaxy ", "page": "2"})

        assert response.status_code == 200
        body = response.json()
        assert body["collection"]["metadata"]["total_hits"] == 1
        assert body["collection"]["items"][0]["data"][0]["nasa_id"] == "G1"
        assert body["collection"]["items"][0]["links"][0]["href"] == "u1"
        assert seen[0].url.params["q"] == "galaxy"
        assert seen[0].url.params["page"] == "2"

    @pytest.mark.asyncio
    async def test_unknown_upstream_fields_are_forwarded(self, test_client, mock_nasa):
        payload = {
            "collection": {
                "version": "1.0",
                "items": [{"href": "https://images.test/asset/G2", "data": [{"nasa_id": "G2", "center": "GSFC"}]}],
            }
        }
        mock_nasa(lambda request: httpx.Response(200, json=payload))

        response = await test_client.get("/api/images", params={"query": "nebula"})

        item = response.json()["collection"]["items"][0]
        assert response.json()["collection"]["version"] == "1.0"
        assert item["href"] == "https://images.test/asset/G2"
        assert item["data"][0]["center"] == "GSFC"

    @pytest.mark.asyncio
    async def test_link_without_href_does_not_fail_page(self, test_client, mock_nasa):
        payload = {
            "collection": {
                "items": [
                    {"data": [{"nasa_id": "G1", "title": "Galaxy 1"}], "links": [{"href": "u1"}]},
                    {"data": [{"nasa_id": "G2", "title": "Galaxy 2"}], "links": [{"rel": "preview"}]},
                ],
                "metadata": {"total_hits": 2},
            }
        }
        mock_nasa(lambda request: httpx.Response(200, json=payload))

        response = await test_client.get("/api/images", params={"query": "galaxy"})

        assert response.status_code == 200
        items = response.json()["collection"]["items"]
        assert len(items) == 2
        assert items[1]["links"] == [{"rel": "preview"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", ["abc", "0", "-1", ""])
    async def test_invalid_page_falls_back_to_one(self, test_client, mock_nasa, galaxy_payload, page):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=galaxy_payload)

        mock_nasa(handler)

        response = await test_client.get("/api/images", params={"query": "galaxy", "page": page})

        assert response.status_code == 200
        assert seen[0].url.params["page"] == "1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{}, {"query": ""}, {"query": "   "}])
    async def test_blank_query_rejected(self, test_client, mock_nasa, params):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        mock_nasa(handler)

        response = await test_client.get("/api/images", params=params)

        assert response.status_code == 400
        body = response.json()
        assert body == {
            "ok": False,
            "error": "Please enter a search term.",
            "code": "validation_error",
            "request_id": response.headers["X-Request-ID"],
        }
        assert calls == []

    @pytest.mark.asyncio
    async def test_upstream_failure(self, test_client, mock_nasa):
        mock_nasa(lambda request: httpx.Response(503))

        response = await test_client.get("/api/images", params={"query": "galaxy"})

        assert response.status_code == 502
        body = response.json()
        assert body["ok"] is False
        assert body["error"] == "NASA Image API error: 503 Service Unavailable"


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_with_key(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["nasa_api_key"] == "configured"
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_degraded_without_key(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "nasa_api_key", "")

        response = await test_client.get("/health")

        assert response.json()["status"] == "degraded"
        assert response.json()["nasa_api_key"] == "missing"
