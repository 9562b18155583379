"""
NASA Explorer Backend — APOD Proxy Route
=========================================

What:  GET /api/apod — Astronomy Picture of the Day by date, or N random ones.
How:   Validates the query string, delegates to NasaClient, wraps the result
       in `{ok: true, data}`. Failures become `{ok: false, error}` through the
       global exception handlers.
Who:   Called by the APOD controller (explorer.client.apod_controller).

Query parameters (exactly one):
    date:  YYYY-MM-DD, between 1995-06-16 and today
    count: integer 1..100, returns a list of random entries

Status codes:
    200  {ok: true, data: Item | Item[]}
    400  missing/both parameters, bad date, bad count
    500  NASA_API_KEY missing on the server
    502  NASA failed, was unreachable, or sent an incomplete record
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from explorer.exceptions import ValidationError
from explorer.schemas.nasa import ApodEnvelope, ErrorEnvelope
from explorer.services.nasa_client import NasaClient, get_nasa_client
from explorer.validators import parse_apod_count, validate_apod_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["APOD"])


@router.get(
    "/apod",
    response_model=ApodEnvelope,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Invalid or missing query parameters", "model": ErrorEnvelope},
        500: {"description": "Server is missing its NASA credential", "model": ErrorEnvelope},
        502: {"description": "NASA APOD API failed", "model": ErrorEnvelope},
    },
    summary="Astronomy Picture of the Day",
    description=(
        "Returns the APOD for a given date (`?date=YYYY-MM-DD`) or a list of random "
        "entries (`?count=N`). Exactly one of the two parameters is required."
    ),
)
async def get_apod(
    date: Optional[str] = Query(default=None, description="APOD date (YYYY-MM-DD)"),
    count: Optional[str] = Query(default=None, description="Number of random entries (1-100)"),
    client: NasaClient = Depends(get_nasa_client),
) -> ApodEnvelope:
    # count arrives as a string so a non-number gets our message, not a 422
    parsed_count = parse_apod_count(count)
    has_date = bool(date and date.strip())

    if not has_date and parsed_count is None:
        raise ValidationError(
            message="Provide either a 'date' or a 'count' query parameter.",
            context={"params": []},
        )
    if has_date and parsed_count is not None:
        raise ValidationError(
            message="Use either 'date' or 'count', not both.",
            context={"params": ["date", "count"]},
        )

    apod_date = validate_apod_date(date).isoformat() if has_date else None

    logger.info("APOD request: date=%s count=%s", apod_date, parsed_count)
    data = await client.fetch_apod(date=apod_date, count=parsed_count)

    return ApodEnvelope(ok=True, data=data)
