"""
NASA Explorer Backend — NASA API Client
========================================

What:  Server-side client for the two upstream NASA APIs:
       - APOD:  {NASA_API_BASE}/planetary/apod       (needs NASA_API_KEY)
       - Image and Video Library: {NASA_IMAGES_API_BASE}/search (no key)
How:   httpx.AsyncClient per call, tenacity retries for transport failures,
       strict checks on the payloads we forward.
Who:   Called by the /api/apod and /api/images route handlers.

Failure translation:
    missing NASA_API_KEY            → ConfigurationError
    connect error / timeout         → retried, then TransportError
    non-2xx from NASA               → UpstreamError (never retried)
    invalid JSON / missing fields   → UpstreamError

The API key travels as a query parameter. The httpx logger is kept at
WARNING (see main.setup_logging) so request URLs carrying it are not logged.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from explorer.config import settings
from explorer.exceptions import ConfigurationError, TransportError, UpstreamError
from explorer.schemas.nasa import ApodRecord, ApodResult, NasaImageSearchResult
from explorer.validators import validate_search_query

logger = logging.getLogger(__name__)


class NasaClient:
    """
    Thin async wrapper around the NASA HTTP APIs.

    Every constructor argument defaults to the matching setting, resolved at
    call time, so the module-level singleton follows configuration changes.
    `transport` lets tests plug in httpx.MockTransport.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        images_api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        retry_min_wait: Optional[float] = None,
        retry_max_wait: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._api_base = api_base
        self._images_api_base = images_api_base
        self._timeout = timeout
        self._retry_attempts = retry_attempts
        self._retry_min_wait = retry_min_wait
        self._retry_max_wait = retry_max_wait
        self._transport = transport

    # ── Resolved configuration ────────────────────────────────────────────

    @property
    def api_key(self) -> str:
        return settings.nasa_api_key if self._api_key is None else self._api_key

    @property
    def api_base(self) -> str:
        return (self._api_base or settings.nasa_api_base).rstrip("/")

    @property
    def images_api_base(self) -> str:
        return (self._images_api_base or settings.nasa_images_api_base).rstrip("/")

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else settings.upstream_timeout

    # ══════════════════════════════════════════════════════════════════════
    # APOD
    # ══════════════════════════════════════════════════════════════════════

    async def fetch_apod(
        self,
        date: Optional[str] = None,
        count: Optional[int] = None,
    ) -> ApodResult:
        """
        Fetch one APOD (by date, or today's) or `count` random ones.

        Returns:
            ApodRecord for a date/today request, list of ApodRecord for count.

        Raises:
            ConfigurationError: NASA_API_KEY is not configured
            TransportError:     NASA unreachable after retries
            UpstreamError:      non-2xx, invalid JSON, or missing required fields
        """
        if not self.api_key:
            raise ConfigurationError(
                message="NASA_API_KEY is not set in environment variables."
            )

        params: Dict[str, Any] = {"api_key": self.api_key}
        if date:
            params["date"] = date
        if count is not None:
            params["count"] = count

        response = await self._get(f"{self.api_base}/planetary/apod", params, "apod")

        if response.is_error:
            raise UpstreamError(
                message=f"APOD API error: {response.status_code} {response.reason_phrase}",
                upstream_status=response.status_code,
                context={"body": response.text[:200]},
            )

        payload = self._json(response, "APOD response was not valid JSON.")

        try:
            if isinstance(payload, list):
                return [ApodRecord.model_validate(record) for record in payload]
            return ApodRecord.model_validate(payload)
        except PydanticValidationError as e:
            raise UpstreamError(
                message="APOD response is missing required fields.",
                context={"errors": e.error_count()},
            )

    # ══════════════════════════════════════════════════════════════════════
    # Image and Video Library
    # ══════════════════════════════════════════════════════════════════════

    async def search_images(self, query: str, page: int = 1) -> NasaImageSearchResult:
        """
        Search the image library for still images matching `query`.

        Raises:
            ValidationError: query is empty after trimming
            TransportError:  library unreachable after retries
            UpstreamError:   non-2xx, invalid JSON, or no `collection` object
        """
        trimmed = validate_search_query(query)
        params = {"q": trimmed, "page": page, "media_type": "image"}

        response = await self._get(f"{self.images_api_base}/search", params, "images")

        if response.is_error:
            raise UpstreamError(
                message=f"NASA Image API error: {response.status_code} {response.reason_phrase}",
                upstream_status=response.status_code,
                context={"body": response.text[:200], "page": page},
            )

        payload = self._json(response, "NASA Image API response was not valid JSON.")

        try:
            return NasaImageSearchResult.model_validate(payload)
        except PydanticValidationError as e:
            raise UpstreamError(
                message="NASA Image API response is missing the result collection.",
                context={"errors": e.error_count()},
            )

    # ══════════════════════════════════════════════════════════════════════
    # Transport
    # ══════════════════════════════════════════════════════════════════════

    def _retrying(self) -> AsyncRetrying:
        attempts = self._retry_attempts or settings.retry_max_attempts
        min_wait = self._retry_min_wait if self._retry_min_wait is not None else settings.retry_min_wait
        max_wait = self._retry_max_wait if self._retry_max_wait is not None else settings.retry_max_wait
        return AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(attempts),
            # min_wait, 2x min_wait, 4x min_wait ... capped at max_wait, plus up to 1s jitter
            wait=wait_exponential(multiplier=min_wait, max=max_wait)
            + wait_random(0, min(1, max_wait)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _get(self, url: str, params: Dict[str, Any], label: str) -> httpx.Response:
        start_time = time.perf_counter()
        try:
            async for attempt in self._retrying():
                with attempt:
                    async with httpx.AsyncClient(
                        timeout=self.timeout, transport=self._transport
                    ) as client:
                        response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.error("NASA %s request timed out: %s", label, type(e).__name__)
            raise TransportError(
                message="The NASA API took too long to respond. Please try again.",
                context={"upstream": label},
            )
        except httpx.TransportError as e:
            logger.error("NASA %s request failed: %s", label, type(e).__name__)
            raise TransportError(context={"upstream": label, "error_type": type(e).__name__})

        logger.info(
            "NASA %s answered %d in %.0fms",
            label,
            response.status_code,
            (time.perf_counter() - start_time) * 1000,
        )
        return response

    @staticmethod
    def _json(response: httpx.Response, message: str) -> Any:
        try:
            return response.json()
        except ValueError:
            raise UpstreamError(message=message, upstream_status=response.status_code)


# ── Singleton Instance ────────────────────────────────────────────────────
nasa_client = NasaClient()


def get_nasa_client() -> NasaClient:
    """FastAPI dependency; tests replace it through app.dependency_overrides."""
    return nasa_client
