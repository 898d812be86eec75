"""Month data controller - load lifecycle for the events of the displayed month"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Awaitable, Callable, Union

from pydantic import BaseModel

from ...shared.validators import validate_date_range
from .realtime import CalendarChange, CalendarChangeFeed
from .schemas import CalendarEventRow

logger = logging.getLogger(__name__)

DEFAULT_LOAD_ERROR = "Error cargando eventos del mes"

FetchMonth = Callable[[date, date], Awaitable[list[CalendarEventRow]]]


class MonthEventsState(BaseModel):
    loading: bool
    rows: list[CalendarEventRow]
    error: str


class MonthEventsLoader:
    """
    Owns {loading, rows, error} for one month range.

    Each load gets a sequence number and only the most recent one may touch
    state, so when requests overlap the latest requested month wins no matter
    which response resolves first. On failure rows keep their previous value.
    """

    def __init__(self, fetch: FetchMonth, month_start: Union[str, date], month_end: Union[str, date]):
        self._fetch = fetch
        self.month_start, self.month_end = validate_date_range(month_start, month_end)
        self.loading = False
        self.rows: list[CalendarEventRow] = []
        self.error = ""
        self._seq = 0

    @property
    def state(self) -> MonthEventsState:
        return MonthEventsState(loading=self.loading, rows=list(self.rows), error=self.error)

    async def reload(self) -> MonthEventsState:
        self._seq += 1
        seq = self._seq
        month_start, month_end = self.month_start, self.month_end

        self.loading = True
        self.error = ""

        try:
            rows = await self._fetch(month_start, month_end)
        except Exception as e:
            if seq != self._seq:
                logger.info(f"⏭️ Discarding stale failure for {month_start} → {month_end}: {e}")
                return self.state
            logger.error(f"❌ Failed to load calendar events for {month_start} → {month_end}: {e}")
            self.error = str(e) or DEFAULT_LOAD_ERROR
            self.loading = False
            return self.state

        if seq != self._seq:
            logger.info(f"⏭️ Discarding stale response for {month_start} → {month_end}")
            return self.state

        self.rows = list(rows)
        self.loading = False
        logger.debug(f"📅 {len(self.rows)} events loaded for {month_start} → {month_end}")
        return self.state

    async def set_range(self, month_start: Union[str, date], month_end: Union[str, date]) -> MonthEventsState:
        """Switch the displayed month; reloads only when the pair changes"""
        new_range = validate_date_range(month_start, month_end)
        if new_range == (self.month_start, self.month_end):
            return self.state

        self.month_start, self.month_end = new_range
        return await self.reload()

    async def _on_change(self, _change: CalendarChange) -> None:
        await self.reload()

    @asynccontextmanager
    async def live(self, feed: CalendarChangeFeed):
        """Reload on every published change while inside the block"""
        token = feed.subscribe(self._on_change)
        try:
            yield self
        finally:
            feed.unsubscribe(token)
