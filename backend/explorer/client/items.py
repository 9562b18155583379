"""
NASA Explorer Client — Result Items
====================================

What:  Flattened view of an image library record for display.
How:   Takes the first `data` entry and the first link of a NasaImageItem.

Keys are stable across re-renders: the provider's nasa_id when present,
otherwise derived from the page number and position on that page.
"""

from typing import List, Optional

from pydantic import BaseModel

from explorer.schemas.nasa import NasaImageItem

UNTITLED = "Untitled image"


class SearchItem(BaseModel):
    key: str
    nasa_id: Optional[str] = None
    title: str = UNTITLED
    description: Optional[str] = None
    date_created: Optional[str] = None
    thumbnail_url: Optional[str] = None


def item_key(nasa_id: Optional[str], page: int, index: int) -> str:
    return nasa_id if nasa_id else f"page-{page}-item-{index}"


def to_search_item(item: NasaImageItem, page: int, index: int) -> SearchItem:
    data = item.data[0] if item.data else None
    nasa_id = data.nasa_id if data else None
    first_link = item.links[0] if item.links else None
    return SearchItem(
        key=item_key(nasa_id, page, index),
        nasa_id=nasa_id,
        title=(data.title if data and data.title else UNTITLED),
        description=data.description if data else None,
        date_created=data.date_created if data else None,
        thumbnail_url=first_link.href if first_link and first_link.href else None,
    )


def to_search_items(items: List[NasaImageItem], page: int) -> List[SearchItem]:
    return [to_search_item(item, page, index) for index, item in enumerate(items)]
