"""Calendar repository - Read-only queries against the unified calendar view"""

import logging
from datetime import date, datetime, time
from typing import Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import CalendarEvent, TechnicianAbsence
from ...shared.validators import validate_date_range
from .schemas import ApprovedAbsence, CalendarEventRow

logger = logging.getLogger(__name__)

DAY_START = time(0, 0, 0)
DAY_END = time(23, 59, 59)


class CalendarQueryError(Exception):
    """A read against the calendar storage failed (network, permission, bad range)"""


class CalendarEventRepository:
    """Repository for calendar reads, bound to one session"""

    def __init__(self, db: Session):
        self.db = db

    def fetch_month_events(
        self, month_start: Union[str, date], month_end: Union[str, date]
    ) -> list[CalendarEventRow]:
        """
        Get every event starting inside the month, ordered by start time.

        Both bounds are inclusive: ``monthStart 00:00:00`` through ``monthEnd 23:59:59``.
        """
        start_day, end_day = validate_date_range(month_start, month_end)
        range_start = datetime.combine(start_day, DAY_START)
        range_end = datetime.combine(end_day, DAY_END)

        try:
            events = (
                self.db.query(CalendarEvent)
                .filter(CalendarEvent.start_at >= range_start, CalendarEvent.start_at <= range_end)
                .order_by(CalendarEvent.start_at.asc(), CalendarEvent.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Calendar range query failed ({start_day} → {end_day}): {e}")
            raise CalendarQueryError("Error consultando eventos del calendario") from e

        logger.debug(f"📅 Loaded {len(events)} calendar events for {start_day} → {end_day}")
        return [CalendarEventRow.model_validate(e) for e in events]

    def sample_events(self, limit: int = 5) -> list[CalendarEventRow]:
        """Diagnostic read of the first rows of the view"""
        try:
            events = self.db.query(CalendarEvent).limit(limit).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Calendar view diagnostic failed: {e}")
            raise CalendarQueryError("Error consultando la vista de calendario") from e

        return [CalendarEventRow.model_validate(e) for e in events]

    def fetch_approved_absences(
        self, month_start: Union[str, date], month_end: Union[str, date]
    ) -> list[ApprovedAbsence]:
        """Get approved absences overlapping the month"""
        start_day, end_day = validate_date_range(month_start, month_end)

        try:
            absences = (
                self.db.query(TechnicianAbsence)
                .filter(
                    TechnicianAbsence.status == "approved",
                    TechnicianAbsence.start_date <= end_day,
                    TechnicianAbsence.end_date >= start_day,
                )
                .order_by(TechnicianAbsence.start_date.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Approved absences query failed ({start_day} → {end_day}): {e}")
            raise CalendarQueryError("Error cargando ausencias aprobadas") from e

        return [ApprovedAbsence.model_validate(a) for a in absences]
