"""
NASA Explorer Backend — Rate Limiting Middleware
=================================================

What:  Per-IP sliding window limiter for the proxy endpoints (/api/*).
How:   Keeps a deque of request timestamps per client IP. Timestamps older
       than the window are dropped on each request; when the remaining count
       reaches the limit the request is answered with 429 and never reaches
       NASA.

All proxied traffic shares one NASA key, so a single noisy client could
otherwise exhaust the hourly quota for everyone.

Single-process only: state lives in this middleware instance.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from explorer.config import settings
from explorer.exceptions import RateLimitExceededError
from explorer.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

# Idle-IP sweep runs once per this many limited requests
CLEANUP_INTERVAL = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        max_requests:    requests allowed per window (default RATE_LIMIT_REQUESTS)
        window_seconds:  window length (default RATE_LIMIT_WINDOW)
        path_prefix:     only paths under this prefix are limited
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        path_prefix: str = "/api/",
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self.path_prefix = path_prefix
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._request_count = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window_start = now - self.window_seconds

        timestamps = self._requests[client_ip]
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window_seconds - now) + 1
            exc = RateLimitExceededError(retry_after=retry_after)
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window_seconds,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "ok": False,
                    "error": exc.message,
                    "code": exc.code,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        timestamps.append(now)
        self._request_count += 1
        if self._request_count % CLEANUP_INTERVAL == 0:
            self._forget_idle_clients(window_start)
        return await call_next(request)

    def _forget_idle_clients(self, window_start: float) -> None:
        """Drop IPs whose newest request has left the window."""
        idle = [ip for ip, ts in self._requests.items() if not ts or ts[-1] <= window_start]
        for ip in idle:
            del self._requests[ip]
        if idle:
            logger.debug("Cleaned up %d idle IP entries", len(idle))
