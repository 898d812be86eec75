"""Scheduling domain schemas - Pydantic models for the unified calendar"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class CalendarEventType(str, Enum):
    """Closed set of event sources merged by the unified view"""

    MAINTENANCE = "maintenance"
    EMERGENCY_SHIFT = "emergency_shift"
    EMERGENCY_VISIT = "emergency_visit"


class CalendarView(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


class NavigateAction(str, Enum):
    PREV = "PREV"
    NEXT = "NEXT"
    TODAY = "TODAY"
    DATE = "DATE"


class CalendarEventRow(BaseModel):
    """One row of the unified calendar view"""

    id: str
    event_type: CalendarEventType
    source_id: str

    title: str
    status: Optional[str] = None

    event_date: date
    start_at: datetime
    end_at: datetime

    client_id: Optional[str] = None
    building_name: Optional[str] = None
    technician_id: Optional[str] = None

    is_external: Optional[bool] = None
    external_personnel_name: Optional[str] = None

    class Config:
        from_attributes = True


class ApprovedAbsence(BaseModel):
    """Approved technician absence overlapping the displayed month"""

    technician_id: str
    start_date: date
    end_date: date

    class Config:
        from_attributes = True


class CalendarDisplayEvent(BaseModel):
    """Renderable calendar entry; ``resource`` keeps the original row for drill-down"""

    title: str
    start: datetime
    end: datetime
    all_day: bool
    resource: CalendarEventRow


class EventTypeCounts(BaseModel):
    maintenance: int = 0
    emergency_shift: int = 0
    emergency_visit: int = 0

    @property
    def total(self) -> int:
        return self.maintenance + self.emergency_shift + self.emergency_visit


class CalendarDay(BaseModel):
    day: date
    in_range: bool
    blocked: bool
    events: list[CalendarDisplayEvent]


class DetailField(BaseModel):
    label: str
    value: str


class EventDetailResponse(BaseModel):
    """Side panel content for a selected event"""

    id: str
    title: str
    event_type: CalendarEventType
    fields: list[DetailField]


class MonthCalendarResponse(BaseModel):
    """Everything the month summary screen needs for one range"""

    month_start: date
    month_end: date
    anchor_date: date
    view: CalendarView
    status_line: str
    error: str
    events: list[CalendarDisplayEvent]
    counts: EventTypeCounts
    total: int
    weeks: list[list[CalendarDay]]
    blocked_days: list[str]
    approved_absences_count: int
    absences_error: str
    messages: dict[str, str]


class NavigateResponse(BaseModel):
    anchor_date: date
    view: CalendarView
    month_start: date
    month_end: date


class DiagnosticsResponse(BaseModel):
    view: str
    count: int
    rows: list[CalendarEventRow]
