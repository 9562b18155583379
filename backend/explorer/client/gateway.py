"""
NASA Explorer Client — Gateway Interfaces
==========================================

What:  Abstract contracts the controllers depend on instead of a concrete
       HTTP client, plus the page model that crosses that boundary.
How:   ProxyClient implements both gateways; tests plug in scripted fakes.

Contract for implementations:
    - return parsed models on success
    - raise TransportError when no response arrived
    - raise UpstreamError for error responses and unreadable bodies
"""

import math
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from explorer.schemas.nasa import ApodResult, NasaImageItem


class ImageSearchPage(BaseModel):
    """One page of image search results as the controller consumes it."""
    page: int = Field(ge=1)
    items: List[NasaImageItem] = Field(default_factory=list)
    total_hits: Optional[int] = None


def numeric_total_hits(value: Any) -> Optional[int]:
    """
    Return `value` as an int when it is a real number, else None.

    Strings, booleans, NaN and infinities all count as "not reported".
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


class ImageSearchGateway(ABC):

    @abstractmethod
    async def search_images(self, query: str, page: int = 1) -> ImageSearchPage:
        """
        Fetch one page of image search results.

        Args:
            query: trimmed, non-empty search term
            page:  1-based page number

        Returns:
            ImageSearchPage with the raw items and the numeric total_hits
            (None when the provider did not report a usable number).
        """
        ...


class ApodGateway(ABC):

    @abstractmethod
    async def get_apod(
        self,
        date: Optional[str] = None,
        count: Optional[int] = None,
    ) -> ApodResult:
        """Fetch one APOD record (date) or a list of them (count)."""
        ...
