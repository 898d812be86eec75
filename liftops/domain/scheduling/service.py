"""Calendar service - Orchestrates one month summary request"""

import logging
from datetime import date
from typing import Optional, Union

from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ...config import CALENDAR_EVENTS_VIEW
from ...shared.validators import parse_iso_date, validate_date_range
from .presentation import CALENDAR_MESSAGES, SummaryMonthView, blocked_days, month_range, navigate
from .repository import CalendarEventRepository, CalendarQueryError
from .schemas import (
    CalendarEventRow,
    CalendarView,
    DiagnosticsResponse,
    EventDetailResponse,
    MonthCalendarResponse,
    NavigateAction,
    NavigateResponse,
)

logger = logging.getLogger(__name__)


def _validated_range(month_start: Union[str, date], month_end: Union[str, date]) -> tuple[date, date]:
    try:
        return validate_date_range(month_start, month_end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


class CalendarService:
    """Service layer for the read-only scheduling calendar"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CalendarEventRepository(db)

    async def fetch_month_events(self, month_start: date, month_end: date) -> list[CalendarEventRow]:
        """Async fetch used by month loaders; the query itself runs in the threadpool"""
        return await run_in_threadpool(self.repo.fetch_month_events, month_start, month_end)

    def _screen(
        self, month_start: date, month_end: date, anchor: Optional[date], view: CalendarView
    ) -> SummaryMonthView:
        return SummaryMonthView(
            fetch=self.fetch_month_events,
            selected_date=anchor or month_start,
            month_start=month_start,
            month_end=month_end,
            on_navigate=lambda new_date: logger.debug(f"🧭 Navigated to {new_date}"),
            view=view,
        )

    async def get_month(
        self,
        month_start: Union[str, date],
        month_end: Union[str, date],
        anchor: Optional[date] = None,
        view: CalendarView = CalendarView.MONTH,
    ) -> MonthCalendarResponse:
        """Load events and approved absences for the month and shape them for display"""
        start_day, end_day = _validated_range(month_start, month_end)
        if anchor is not None and not start_day <= anchor <= end_day:
            raise HTTPException(status_code=400, detail="date must fall inside month_start..month_end")
        logger.info(f"📅 Month calendar requested: {start_day} → {end_day} ({view.value})")

        screen = self._screen(start_day, end_day, anchor, view)
        state = await screen.load()

        absences_error = ""
        absences = []
        try:
            absences = await run_in_threadpool(self.repo.fetch_approved_absences, start_day, end_day)
        except CalendarQueryError as e:
            logger.warning(f"⚠️ Approved absences unavailable for {start_day} → {end_day}: {e}")
            absences_error = str(e)

        blocked = blocked_days(absences, within=(start_day, end_day))
        counts = screen.counts

        return MonthCalendarResponse(
            month_start=start_day,
            month_end=end_day,
            anchor_date=screen.selected_date,
            view=view,
            status_line=screen.status_line,
            error=state.error,
            events=screen.events,
            counts=counts,
            total=counts.total,
            weeks=screen.grid(blocked),
            blocked_days=sorted(blocked),
            approved_absences_count=len(absences),
            absences_error=absences_error,
            messages=CALENDAR_MESSAGES,
        )

    async def get_event_detail(
        self, event_id: str, month_start: Union[str, date], month_end: Union[str, date]
    ) -> EventDetailResponse:
        """Detail panel for one event of the month"""
        start_day, end_day = _validated_range(month_start, month_end)

        screen = self._screen(start_day, end_day, None, CalendarView.MONTH)
        state = await screen.load()
        if state.error:
            raise HTTPException(status_code=503, detail=state.error)

        row = screen.select_event(event_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Calendar event not found")

        return EventDetailResponse(
            id=row.id,
            title=row.title,
            event_type=row.event_type,
            fields=screen.selection.detail(),
        )

    @staticmethod
    def navigate(
        anchor: Union[str, date],
        view: CalendarView,
        action: NavigateAction,
        target: Optional[Union[str, date]] = None,
    ) -> NavigateResponse:
        """Compute the next anchor date and the month range to load for it"""
        try:
            anchor_day = parse_iso_date(anchor)
            target_day = parse_iso_date(target) if target is not None else None
            new_date = navigate(anchor_day, view, action, target_day)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        month_start, month_end = month_range(new_date)
        return NavigateResponse(
            anchor_date=new_date,
            view=view,
            month_start=month_start,
            month_end=month_end,
        )

    async def diagnostics(self, limit: int) -> DiagnosticsResponse:
        """Sample rows straight from the unified view"""
        rows = await run_in_threadpool(self.repo.sample_events, limit)
        logger.info(f"🔎 Calendar view diagnostic returned {len(rows)} row(s)")
        return DiagnosticsResponse(view=CALENDAR_EVENTS_VIEW, count=len(rows), rows=rows)
