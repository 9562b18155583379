"""
NASA Explorer Client — Notification Bus
========================================

What:  Publish/subscribe channel for user-facing notices (the "toasts").
How:   Controllers receive a NoticeBus and publish success/error/info
       notices; whatever renders them subscribes a listener. Controllers never
       touch presentation state directly.

Default display durations:
    success  3000 ms
    error    4000 ms
    info     3000 ms
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


DEFAULT_DURATIONS_MS = {
    NoticeLevel.SUCCESS: 3000,
    NoticeLevel.ERROR: 4000,
    NoticeLevel.INFO: 3000,
}


class Notice(BaseModel):
    level: NoticeLevel
    message: str
    duration_ms: int = Field(ge=0)


NoticeListener = Callable[[Notice], None]


class NoticeBus:
    """
    Synchronous fan-out of notices to subscribed listeners.

    Listeners are called in subscription order. A listener that raises
    propagates to the publisher.
    """

    def __init__(self) -> None:
        self._listeners: List[NoticeListener] = []

    def subscribe(self, listener: NoticeListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, notice: Notice) -> None:
        logger.debug("Notice [%s] %s", notice.level.value, notice.message)
        for listener in list(self._listeners):
            listener(notice)

    def _emit(self, level: NoticeLevel, message: str, duration_ms: Optional[int] = None) -> Notice:
        notice = Notice(
            level=level,
            message=message,
            duration_ms=DEFAULT_DURATIONS_MS[level] if duration_ms is None else duration_ms,
        )
        self.publish(notice)
        return notice

    def success(self, message: str, duration_ms: Optional[int] = None) -> Notice:
        return self._emit(NoticeLevel.SUCCESS, message, duration_ms)

    def error(self, message: str, duration_ms: Optional[int] = None) -> Notice:
        return self._emit(NoticeLevel.ERROR, message, duration_ms)

    def info(self, message: str, duration_ms: Optional[int] = None) -> Notice:
        return self._emit(NoticeLevel.INFO, message, duration_ms)


def friendly_error(message: str) -> str:
    """
    Pick a friendlier phrase for a raw proxy error message.

    Checked in order, first match wins:
        contains "API" or "fetch"      → NASA API error phrase
        contains "key" or "DEMO_KEY"   → invalid key phrase
        otherwise                      → the message unchanged
    """
    if "API" in message or "fetch" in message:
        return "NASA API error. Please try again later."
    if "key" in message or "DEMO_KEY" in message:
        return "Invalid API key. Please check your configuration."
    return message
