"""
Calendar presentation - turns unified view rows into renderable calendar data.

Everything here is pure except SummaryMonthView, which owns one month loader,
the current selection and the navigation callback of a calendar screen.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, Union

from dateutil.relativedelta import relativedelta

from .month_loader import FetchMonth, MonthEventsLoader, MonthEventsState
from .schemas import (
    ApprovedAbsence,
    CalendarDay,
    CalendarDisplayEvent,
    CalendarEventRow,
    CalendarEventType,
    CalendarView,
    DetailField,
    EventTypeCounts,
    NavigateAction,
)

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"

EVENT_TYPE_LABELS = {
    CalendarEventType.MAINTENANCE: "Mantención",
    CalendarEventType.EMERGENCY_SHIFT: "Turno emergencia",
    CalendarEventType.EMERGENCY_VISIT: "Visita emergencia",
}

CALENDAR_MESSAGES = {
    "allDay": "Todo el día",
    "previous": "Anterior",
    "next": "Siguiente",
    "today": "Hoy",
    "month": "Mes",
    "week": "Semana",
    "day": "Día",
    "agenda": "Agenda",
    "date": "Fecha",
    "time": "Hora",
    "event": "Evento",
    "noEventsInRange": "No hay eventos en este rango.",
}

STATUS_LOADING = "Cargando eventos..."
STATUS_READY = "Resumen maestro (solo lectura)"

WEEK_STARTS_ON = calendar.MONDAY


def is_all_day(event_type: CalendarEventType) -> bool:
    return event_type == CalendarEventType.MAINTENANCE


def to_display_event(row: CalendarEventRow) -> CalendarDisplayEvent:
    return CalendarDisplayEvent(
        title=row.title,
        start=row.start_at,
        end=row.end_at,
        all_day=is_all_day(row.event_type),
        resource=row,
    )


def to_display_events(rows: Iterable[CalendarEventRow]) -> list[CalendarDisplayEvent]:
    """One display event per row, same order, nothing dropped"""
    return [to_display_event(row) for row in rows]


def count_by_type(rows: Iterable[CalendarEventRow]) -> EventTypeCounts:
    counts = {event_type.value: 0 for event_type in CalendarEventType}
    for row in rows:
        counts[row.event_type.value] += 1
    return EventTypeCounts(**counts)


def type_label(event_type: Union[CalendarEventType, str]) -> str:
    return EVENT_TYPE_LABELS[CalendarEventType(event_type)]


def safe_display(value) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def event_detail(row: CalendarEventRow) -> list[DetailField]:
    """Side panel fields; 'Externo' only appears for externally staffed shifts"""
    fields = [
        DetailField(label="Tipo", value=type_label(row.event_type)),
        DetailField(label="Estado", value=safe_display(row.status)),
        DetailField(label="Fecha", value=row.start_at.strftime("%d-%m-%Y")),
        DetailField(
            label="Horario",
            value=f"{row.start_at.strftime('%H:%M')} → {row.end_at.strftime('%H:%M')}",
        ),
        DetailField(label="Edificio", value=safe_display(row.building_name)),
        DetailField(label="Cliente (id)", value=safe_display(row.client_id)),
        DetailField(label="Técnico (id)", value=safe_display(row.technician_id)),
    ]
    if row.is_external:
        fields.append(DetailField(label="Externo", value=safe_display(row.external_personnel_name)))
    return fields


class CalendarSelection:
    """Pointer to the original row of the clicked event"""

    def __init__(self):
        self.selected: Optional[CalendarEventRow] = None

    def select(self, event: Union[CalendarDisplayEvent, CalendarEventRow]) -> CalendarEventRow:
        row = event.resource if isinstance(event, CalendarDisplayEvent) else event
        self.selected = row
        return row

    def clear(self) -> None:
        self.selected = None

    def detail(self) -> Optional[list[DetailField]]:
        if self.selected is None:
            return None
        return event_detail(self.selected)


def blocked_days(
    absences: Iterable[ApprovedAbsence], within: Optional[tuple[date, date]] = None
) -> set[str]:
    """ISO days covered by at least one approved absence, clipped to `within` when given"""
    days: set[str] = set()
    for absence in absences:
        current, last = absence.start_date, absence.end_date
        if within is not None:
            current, last = max(current, within[0]), min(last, within[1])
        while current <= last:
            days.add(current.isoformat())
            current += timedelta(days=1)
    return days


# ============================================================================
# GRID
# ============================================================================


def event_days(event: CalendarDisplayEvent) -> list[date]:
    """Days touched by the event; an end exactly at midnight of a later day is exclusive"""
    first = event.start.date()
    last = event.end.date()
    if last > first and event.end.time() == datetime.min.time():
        last -= timedelta(days=1)
    if last < first:
        last = first

    days = []
    current = first
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days


def _events_by_day(events: Iterable[CalendarDisplayEvent]) -> dict[date, list[CalendarDisplayEvent]]:
    by_day: dict[date, list[CalendarDisplayEvent]] = {}
    for event in events:
        for day in event_days(event):
            by_day.setdefault(day, []).append(event)
    # All-day entries render above timed ones
    for day_events in by_day.values():
        day_events.sort(key=lambda e: (not e.all_day, e.start))
    return by_day


def start_of_week(day: date) -> date:
    return day - timedelta(days=(day.weekday() - WEEK_STARTS_ON) % 7)


def _day_cells(
    days: Iterable[date],
    events: Iterable[CalendarDisplayEvent],
    blocked: set[str],
    in_range: Callable[[date], bool],
) -> list[CalendarDay]:
    by_day = _events_by_day(events)
    return [
        CalendarDay(
            day=day,
            in_range=in_range(day),
            blocked=day.isoformat() in blocked,
            events=by_day.get(day, []),
        )
        for day in days
    ]


def build_month_grid(
    anchor: date,
    events: Iterable[CalendarDisplayEvent],
    blocked: Optional[set[str]] = None,
    bounds: Optional[tuple[date, date]] = None,
) -> list[list[CalendarDay]]:
    """
    Whole weeks covering the anchor's month.

    Days outside `bounds` (the loaded range, by default the anchor's month)
    have in_range=False.
    """
    first, last = month_bounds(anchor)
    lower, upper = bounds or (first, last)
    grid_start = start_of_week(first)
    grid_end = start_of_week(last) + timedelta(days=6)

    days = [grid_start + timedelta(days=i) for i in range((grid_end - grid_start).days + 1)]
    cells = _day_cells(days, list(events), blocked or set(), lambda d: lower <= d <= upper)
    return [cells[i : i + 7] for i in range(0, len(cells), 7)]


def build_week(
    anchor: date,
    events: Iterable[CalendarDisplayEvent],
    blocked: Optional[set[str]] = None,
) -> list[CalendarDay]:
    week_start = start_of_week(anchor)
    days = [week_start + timedelta(days=i) for i in range(7)]
    return _day_cells(days, list(events), blocked or set(), lambda d: True)


def build_day(
    anchor: date,
    events: Iterable[CalendarDisplayEvent],
    blocked: Optional[set[str]] = None,
) -> CalendarDay:
    return _day_cells([anchor], list(events), blocked or set(), lambda d: True)[0]


def build_view(
    view: CalendarView,
    anchor: date,
    events: Iterable[CalendarDisplayEvent],
    blocked: Optional[set[str]] = None,
    bounds: Optional[tuple[date, date]] = None,
) -> list[list[CalendarDay]]:
    """Grid for any view, always as a list of rows"""
    if view == CalendarView.MONTH:
        return build_month_grid(anchor, events, blocked, bounds)
    if view == CalendarView.WEEK:
        return [build_week(anchor, events, blocked)]
    return [[build_day(anchor, events, blocked)]]


# ============================================================================
# NAVIGATION
# ============================================================================


def month_bounds(anchor: date) -> tuple[date, date]:
    first = anchor.replace(day=1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last


def month_range(anchor: date) -> tuple[str, str]:
    """(monthStart, monthEnd) as ISO strings for the anchor's month"""
    first, last = month_bounds(anchor)
    return first.isoformat(), last.isoformat()


def navigate(
    anchor: date,
    view: CalendarView,
    action: NavigateAction,
    target: Optional[date] = None,
    today: Optional[date] = None,
) -> date:
    if action == NavigateAction.TODAY:
        return today or date.today()
    if action == NavigateAction.DATE:
        if target is None:
            raise ValueError("DATE navigation requires a target date")
        return target

    step = 1 if action == NavigateAction.NEXT else -1
    if view == CalendarView.MONTH:
        return anchor + relativedelta(months=step)
    if view == CalendarView.WEEK:
        return anchor + timedelta(days=7 * step)
    return anchor + timedelta(days=step)


# ============================================================================
# SCREEN CONTROLLER
# ============================================================================


class SummaryMonthView:
    """
    Read-only month summary screen.

    Inputs mirror what a parent screen provides: the selected date, the
    month range to load and an on_navigate callback. The view owns its own
    loader and selection; nothing is shared between instances.
    """

    def __init__(
        self,
        fetch: FetchMonth,
        selected_date: date,
        month_start: Union[str, date],
        month_end: Union[str, date],
        on_navigate: Callable[[date], None],
        view: CalendarView = CalendarView.MONTH,
    ):
        self.selected_date = selected_date
        self.view = view
        self.on_navigate = on_navigate
        self.loader = MonthEventsLoader(fetch, month_start, month_end)
        self.selection = CalendarSelection()

    async def load(self) -> MonthEventsState:
        return await self.loader.reload()

    async def set_range(self, month_start: Union[str, date], month_end: Union[str, date]) -> MonthEventsState:
        return await self.loader.set_range(month_start, month_end)

    @property
    def events(self) -> list[CalendarDisplayEvent]:
        return to_display_events(self.loader.rows)

    @property
    def counts(self) -> EventTypeCounts:
        return count_by_type(self.loader.rows)

    @property
    def status_line(self) -> str:
        return STATUS_LOADING if self.loader.loading else STATUS_READY

    def grid(self, blocked: Optional[set[str]] = None) -> list[list[CalendarDay]]:
        return build_view(
            self.view,
            self.selected_date,
            self.events,
            blocked,
            bounds=(self.loader.month_start, self.loader.month_end),
        )

    def navigate(self, action: NavigateAction, target: Optional[date] = None) -> date:
        new_date = navigate(self.selected_date, self.view, action, target)
        logger.debug(f"🧭 Calendar navigate {action.value}: {self.selected_date} → {new_date}")
        self.selected_date = new_date
        self.on_navigate(new_date)
        return new_date

    def select_event(self, event_id: str) -> Optional[CalendarEventRow]:
        for row in self.loader.rows:
            if row.id == event_id:
                return self.selection.select(row)
        return None

    def clear_selection(self) -> None:
        self.selection.clear()
