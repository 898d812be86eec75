"""
In-process change feed for calendar sources.

Domains that mutate maintenance schedules, emergency shifts or visits publish a
CalendarChange here; month loaders subscribed through MonthEventsLoader.live()
reload through the same path used for manual refreshes.
"""

import itertools
import logging
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel

from .schemas import CalendarEventType

logger = logging.getLogger(__name__)


class CalendarChange(BaseModel):
    event_type: CalendarEventType
    source_id: Optional[str] = None


ChangeCallback = Callable[[CalendarChange], Awaitable[None]]


class CalendarChangeFeed:
    """Subscribe/unsubscribe registry; publish awaits every subscriber in order"""

    def __init__(self):
        self._subscribers: dict[int, ChangeCallback] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, callback: ChangeCallback) -> int:
        token = next(self._tokens)
        self._subscribers[token] = callback
        logger.debug(f"🔔 Calendar feed subscriber {token} registered")
        return token

    def unsubscribe(self, token: int) -> None:
        if self._subscribers.pop(token, None) is not None:
            logger.debug(f"🔕 Calendar feed subscriber {token} removed")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self, change: CalendarChange) -> int:
        """Notify current subscribers; returns how many were notified"""
        callbacks = list(self._subscribers.values())
        logger.info(
            f"📣 Calendar change ({change.event_type.value}:{change.source_id or '*'}) → {len(callbacks)} subscriber(s)"
        )
        for callback in callbacks:
            await callback(change)
        return len(callbacks)
