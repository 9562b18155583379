"""
NASA Explorer Client — APOD Controller
=======================================

What:  State behind the "picture of the day" form: pick a date, load the
       record, show it.
How:   submit() validates the date locally, then asks the APOD proxy for that
       single day. Same generation stamping as the search controller, so a
       slow earlier submit cannot overwrite a later one.

Outcomes:
    invalid date         → field_error, error cleared, result kept, no request
    {ok: false, error}   → error = server message, error notice (categorized)
    no response          → error = network message, error notice
    {ok: true, data}     → result, "APOD Loaded" notice
"""

import logging
from datetime import date as date_type
from typing import Callable, Optional

from pydantic import BaseModel

from explorer.client.gateway import ApodGateway
from explorer.client.notifications import NoticeBus, friendly_error
from explorer.exceptions import ExplorerError, TransportError, UpstreamError, ValidationError
from explorer.schemas.nasa import ApodRecord, ApodResult
from explorer.validators import validate_apod_date

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
UNEXPECTED_ERROR_MESSAGE = "Failed to load APOD. Please try again."
SUCCESS_MESSAGE = "APOD Loaded"


class ApodState(BaseModel):
    date: str = ""
    loading: bool = False
    error: Optional[str] = None
    field_error: Optional[str] = None
    result: Optional[ApodRecord] = None


class ApodController:
    """
    Args:
        gateway:  APOD source (ProxyClient in production)
        notices:  optional bus for success/error notices
        today:    callable returning "today"; tests pin it
    """

    def __init__(
        self,
        gateway: ApodGateway,
        notices: Optional[NoticeBus] = None,
        today: Optional[Callable[[], date_type]] = None,
    ):
        self.gateway = gateway
        self.notices = notices
        self._today = today
        self.state = ApodState()
        self._generation = 0

    def set_date(self, value: str) -> None:
        self.state.date = value
        self.state.field_error = None

    async def submit(self, date: Optional[str] = None) -> bool:
        """Load the APOD for `date` (or the date already in state)."""
        if date is not None:
            self.state.date = date

        try:
            parsed = validate_apod_date(
                self.state.date,
                today=self._today() if self._today else None,
            )
        except ValidationError as e:
            # The last loaded picture stays on screen; a stale request error does not
            self.state.field_error = e.message
            self.state.error = None
            return False

        state = self.state
        state.field_error = None
        state.error = None
        state.result = None
        state.loading = True

        self._generation += 1
        generation = self._generation

        try:
            data = await self.gateway.get_apod(date=parsed.isoformat())
            record = self._single_record(data)
        except TransportError as e:
            if generation != self._generation:
                return True
            logger.warning("APOD request failed: %s", e.message)
            self._fail(NETWORK_ERROR_MESSAGE, NETWORK_ERROR_MESSAGE)
            return True
        except ExplorerError as e:
            if generation != self._generation:
                return True
            logger.warning("APOD request rejected: %s", e.message)
            self._fail(e.message, friendly_error(e.message))
            return True
        except Exception as e:
            if generation != self._generation:
                return True
            logger.error("Unexpected APOD failure: %s", str(e), exc_info=True)
            self._fail(UNEXPECTED_ERROR_MESSAGE, UNEXPECTED_ERROR_MESSAGE)
            return True

        if generation != self._generation:
            return True

        state.result = record
        state.loading = False
        if self.notices is not None:
            self.notices.success(SUCCESS_MESSAGE)
        return True

    @staticmethod
    def _single_record(data: ApodResult) -> ApodRecord:
        if isinstance(data, list):
            if not data:
                raise UpstreamError(message="APOD response contained no records.")
            return data[0]
        return data

    def _fail(self, message: str, notice: str) -> None:
        self.state.error = message
        self.state.loading = False
        if self.notices is not None:
            self.notices.error(notice)
