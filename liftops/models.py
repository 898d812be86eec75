from sqlalchemy import Boolean, Column, Date, DateTime, String, Text

from .config import CALENDAR_EVENTS_VIEW
from .database import Base


class CalendarEvent(Base):
    """
    Read-only mapping of the unified calendar view.

    The view unions maintenance_schedules, emergency_shifts (one row per
    covered day) and emergency_visits; see migrations/create_calendar_events_view.py.
    Rows are never written from this application.
    """

    __tablename__ = CALENDAR_EVENTS_VIEW

    # "maintenance:<id>", "emergency_visit:<id>" or "emergency_shift:<id>:<YYYY-MM-DD>"
    id = Column(String(255), primary_key=True)
    event_type = Column(String(32), nullable=False, index=True)
    source_id = Column(String(64), nullable=False)

    title = Column(String(255), nullable=False)
    status = Column(String(50), nullable=True)

    event_date = Column(Date, nullable=False)
    start_at = Column(DateTime, nullable=False, index=True)
    end_at = Column(DateTime, nullable=False)

    client_id = Column(String(64), nullable=True)
    building_name = Column(String(255), nullable=True)
    technician_id = Column(String(64), nullable=True)

    # Shift rows staffed by non-employee personnel
    is_external = Column(Boolean, nullable=True)
    external_personnel_name = Column(String(255), nullable=True)


class TechnicianAbsence(Base):
    """Technician availability entries (vacations, leave); only approved ones block days"""

    __tablename__ = "technician_availability"

    id = Column(String(64), primary_key=True)
    technician_id = Column(String(64), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    absence_type = Column(String(50), nullable=True)
    reason = Column(Text, nullable=True)
    # pending → approved | rejected
    status = Column(String(20), default="pending", nullable=False, index=True)
