"""
NASA Explorer Client — Proxy Endpoint Client
=============================================

What:  The controllers' only way to the network: GET /api/images and
       GET /api/apod on the NASA Explorer backend.
How:   httpx.AsyncClient per call. Every outcome is either a parsed model
       or one of our exceptions:

    no response (DNS, refused, timeout)      → TransportError
    non-2xx, or APOD body with ok: false     → UpstreamError (server message)
    2xx with a body we cannot read           → UpstreamError

No retries here: a failed request is reported once and the user decides
whether to try again.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from explorer.client.gateway import (
    ApodGateway,
    ImageSearchGateway,
    ImageSearchPage,
    numeric_total_hits,
)
from explorer.exceptions import TransportError, UpstreamError
from explorer.schemas.nasa import ApodEnvelope, ApodResult, NasaImageSearchResult

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_ERROR = "Something went wrong while fetching NASA images."
DEFAULT_APOD_ERROR = "Failed to load APOD. Please try again."


class ProxyClient(ImageSearchGateway, ApodGateway):
    """
    Client for the NASA Explorer proxy endpoints.

    Args:
        base_url:     backend origin, e.g. "http://localhost:8000"
        search_path:  image search endpoint path
        apod_path:    APOD endpoint path
        timeout:      seconds per request
        transport:    optional httpx transport (ASGITransport, MockTransport)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        search_path: str = "/api/images",
        apod_path: str = "/api/apod",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.search_path = search_path
        self.apod_path = apod_path
        self.timeout = timeout
        self._transport = transport

    async def search_images(self, query: str, page: int = 1) -> ImageSearchPage:
        """Fetch one page of image results for an already-validated query."""
        response = await self._get(self.search_path, {"query": query, "page": str(page)})
        body = self._json_or_none(response)

        if response.is_error:
            raise UpstreamError(
                message=self._error_message(body, DEFAULT_SEARCH_ERROR),
                upstream_status=response.status_code,
            )

        try:
            result = NasaImageSearchResult.model_validate(body)
        except PydanticValidationError:
            raise UpstreamError(
                message="Received an unreadable response while fetching NASA images.",
                upstream_status=response.status_code,
            )

        metadata = result.collection.metadata
        return ImageSearchPage(
            page=page,
            items=result.collection.items,
            total_hits=numeric_total_hits(metadata.total_hits) if metadata else None,
        )

    async def get_apod(
        self,
        date: Optional[str] = None,
        count: Optional[int] = None,
    ) -> ApodResult:
        """Fetch APOD data; the envelope's `ok` flag decides success."""
        params: Dict[str, str] = {}
        if date:
            params["date"] = date
        if count is not None:
            params["count"] = str(count)

        response = await self._get(self.apod_path, params)
        body = self._json_or_none(response)

        if not isinstance(body, dict) or not body.get("ok"):
            raise UpstreamError(
                message=self._error_message(body, DEFAULT_APOD_ERROR),
                upstream_status=response.status_code,
            )

        try:
            return ApodEnvelope.model_validate(body).data
        except PydanticValidationError:
            raise UpstreamError(
                message="APOD response is missing required fields.",
                upstream_status=response.status_code,
            )

    # ── Internals ─────────────────────────────────────────────────────────

    async def _get(self, path: str, params: Dict[str, str]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                return await client.get(path, params=params)
        except httpx.TransportError as e:
            logger.warning("Request to %s failed: %s", path, type(e).__name__)
            raise TransportError(
                message="Network error. Please try again.",
                context={"path": path, "error_type": type(e).__name__},
            )

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(body: Any, default: str) -> str:
        if isinstance(body, dict):
            for key in ("message", "error"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return default
