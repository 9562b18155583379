"""
NASA Explorer Backend — Health Check Route
===========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Reports version, uptime and whether the NASA credential is configured.
       It does not call NASA: probes every few seconds would eat the quota.

Status levels:
    - healthy:   everything configured
    - degraded:  NASA_API_KEY missing (image search works, APOD answers 500)
"""

import time

from fastapi import APIRouter

from explorer import __version__
from explorer.config import settings
from explorer.schemas.nasa import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check() -> HealthResponse:
    key_configured = settings.has_nasa_api_key
    return HealthResponse(
        status="healthy" if key_configured else "degraded",
        version=__version__,
        nasa_api_key="configured" if key_configured else "missing",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
