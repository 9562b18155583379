"""
NASA Explorer Backend — Image Search Proxy Route
=================================================

What:  GET /api/images — one page of NASA Image and Video Library results.
How:   Forwards `query`/`page` to NasaClient.search_images and returns the
       upstream collection as-is.
Who:   Called by the search controller (explorer.client.search_controller).

Example client usage ("load more"):
    Page 1: GET /api/images?query=galaxy
    Page 2: GET /api/images?query=galaxy&page=2
    (the client stops when it holds total_hits items, or a page comes back empty)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from explorer.schemas.nasa import ErrorEnvelope, NasaImageSearchResult
from explorer.services.nasa_client import NasaClient, get_nasa_client
from explorer.validators import parse_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Images"])


@router.get(
    "/images",
    response_model=NasaImageSearchResult,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Empty search term", "model": ErrorEnvelope},
        502: {"description": "NASA Image API failed", "model": ErrorEnvelope},
    },
    summary="Search the NASA Image and Video Library",
)
async def search_images(
    query: str = Query(default="", description="Search term (required, non-blank)"),
    page: Optional[str] = Query(
        default=None,
        description="1-based page number; invalid values fall back to 1",
    ),
    client: NasaClient = Depends(get_nasa_client),
) -> NasaImageSearchResult:
    page_number = parse_page(page)
    logger.info("Image search: query=%r page=%d", query.strip(), page_number)
    return await client.search_images(query, page_number)
