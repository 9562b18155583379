"""
NASA Explorer Client — Search Controller
=========================================

What:  State machine behind the image search screen: query text, accumulated
       results, page cursor, loading/error flags.
How:   start_search() replaces the result list with page 1; load_more()
       appends the next page. Every fetch is stamped with a generation number
       and a response from a superseded generation is dropped untouched.

State machine:
    IDLE ──start_search──→ LOADING_INITIAL ──success──→ READY(has_more)
    any  ──start_search──→ LOADING_INITIAL            (always allowed)
    READY(has_more) ──load_more──→ LOADING_MORE ──success──→ READY
    LOADING_* ──failure──→ READY with error set

has_more after a successful page:
    total_hits known and > 0  → len(items) < total_hits
    otherwise                 → the page returned at least one item
An empty page therefore ends pagination even if the provider had more.

No automatic retries. Failures become `state.error` (and an error notice when
a NoticeBus is attached); nothing raises out of the public methods.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from explorer.client.gateway import ImageSearchGateway, ImageSearchPage
from explorer.client.items import SearchItem, to_search_items
from explorer.client.notifications import NoticeBus, friendly_error
from explorer.exceptions import ExplorerError, ValidationError
from explorer.validators import validate_search_query

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went wrong while fetching NASA images."


class FetchMode(str, Enum):
    RESET = "reset"
    APPEND = "append"


class SearchState(BaseModel):
    query: str = ""
    items: List[SearchItem] = Field(default_factory=list)
    total_hits: Optional[int] = None
    current_page: int = Field(default=1, ge=1)
    is_initial_loading: bool = False
    is_loading_more: bool = False
    has_more: bool = True
    error: Optional[str] = None
    has_searched: bool = False

    @property
    def is_busy(self) -> bool:
        return self.is_initial_loading or self.is_loading_more

    @property
    def query_valid(self) -> bool:
        """Whether the submit control should be enabled."""
        return bool(self.query.strip())


StateListener = Callable[[SearchState], None]


class SearchController:
    """
    One search session.

    Args:
        gateway:    where pages come from (ProxyClient in production)
        notices:    optional bus for error notices
        on_change:  optional callback, receives a copy of the state after
                    every transition
    """

    def __init__(
        self,
        gateway: ImageSearchGateway,
        notices: Optional[NoticeBus] = None,
        on_change: Optional[StateListener] = None,
    ):
        self.gateway = gateway
        self.notices = notices
        self.on_change = on_change
        self.state = SearchState()
        self._active_query: Optional[str] = None
        self._generation = 0

    @property
    def active_query(self) -> Optional[str]:
        """The trimmed query of the last accepted search."""
        return self._active_query

    def snapshot(self) -> SearchState:
        return self.state.model_copy(deep=True)

    def set_query(self, text: str) -> None:
        self.state.query = text
        self._notify()

    async def start_search(self, query: Optional[str] = None) -> bool:
        """
        Validate the query and load page 1, replacing any previous results.

        Returns False (no request issued, `state.error` set) when the query is
        empty after trimming; True once the fetch has been handled.
        """
        if query is not None:
            self.state.query = query

        try:
            trimmed = validate_search_query(self.state.query)
        except ValidationError as e:
            self.state.error = e.message
            self._notify()
            return False

        self._active_query = trimmed
        state = self.state
        state.items = []
        state.total_hits = None
        state.current_page = 1
        state.has_more = True
        state.is_initial_loading = True
        state.is_loading_more = False
        state.error = None
        state.has_searched = True
        self._notify()

        logger.info("Searching images for %r", trimmed)
        await self._fetch(trimmed, 1, FetchMode.RESET)
        return True

    async def load_more(self) -> bool:
        """
        Append the next page for the active query.

        No-op returning False when nothing has been searched, there is nothing
        more to load, or a fetch is already in flight.
        """
        state = self.state
        if not state.has_searched or not state.has_more or state.is_busy:
            return False
        if self._active_query is None:
            return False

        next_page = state.current_page + 1
        state.is_loading_more = True
        state.error = None
        self._notify()

        logger.debug("Loading page %d for %r", next_page, self._active_query)
        await self._fetch(self._active_query, next_page, FetchMode.APPEND)
        return True

    async def retry(self) -> bool:
        """Run start_search again with the last submitted query."""
        if self._active_query is None:
            return await self.start_search()
        return await self.start_search(self._active_query)

    # ── Internals ─────────────────────────────────────────────────────────

    async def _fetch(self, query: str, page: int, mode: FetchMode) -> None:
        self._generation += 1
        generation = self._generation

        try:
            result = await self.gateway.search_images(query, page)
        except ExplorerError as e:
            if self._is_stale(generation, page):
                return
            logger.warning("Image search failed (page %d): %s", page, e.message)
            self._fail(e.message, mode)
            return
        except Exception as e:
            if self._is_stale(generation, page):
                return
            logger.error("Unexpected image search failure: %s", str(e), exc_info=True)
            self._fail(UNEXPECTED_ERROR_MESSAGE, mode)
            return

        if self._is_stale(generation, page):
            return
        self._apply(result, page, mode)

    def _is_stale(self, generation: int, page: int) -> bool:
        if generation == self._generation:
            return False
        logger.debug(
            "Dropping page %d response from generation %d (current %d)",
            page,
            generation,
            self._generation,
        )
        return True

    def _apply(self, result: ImageSearchPage, page: int, mode: FetchMode) -> None:
        state = self.state
        new_items = to_search_items(result.items, page)

        if mode is FetchMode.RESET:
            state.items = new_items
        else:
            state.items = state.items + new_items

        if result.total_hits is not None:
            state.total_hits = result.total_hits
        state.current_page = page

        if state.total_hits is not None and state.total_hits > 0:
            state.has_more = len(state.items) < state.total_hits
        else:
            state.has_more = len(new_items) > 0

        state.error = None
        state.is_initial_loading = False
        state.is_loading_more = False
        self._notify()

    def _fail(self, message: str, mode: FetchMode) -> None:
        state = self.state
        state.error = message
        if mode is FetchMode.RESET:
            state.items = []
            state.total_hits = None
            state.has_more = False
        state.is_initial_loading = False
        state.is_loading_more = False
        self._notify()

        if self.notices is not None:
            self.notices.error(friendly_error(message))

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.snapshot())
