"""Tests for the calendar repository range queries."""

from datetime import date, datetime

import pytest

from liftops.database import create_session_factory
from liftops.domain.scheduling.repository import CalendarEventRepository, CalendarQueryError
from liftops.domain.scheduling.schemas import CalendarEventType

from .factories import SCENARIO_A, add_absence, add_events, event_fields


def test_month_range_includes_both_boundaries(db):
    add_events(
        db,
        event_fields(id="maintenance:first", start_at=datetime(2024, 3, 1, 0, 0, 0)),
        event_fields(id="emergency_visit:last", event_type="emergency_visit", start_at=datetime(2024, 3, 31, 23, 59, 59)),
        event_fields(id="maintenance:before", start_at=datetime(2024, 2, 29, 23, 59, 59)),
        event_fields(id="emergency_visit:after", event_type="emergency_visit", start_at=datetime(2024, 4, 1, 0, 0, 0)),
    )

    rows = CalendarEventRepository(db).fetch_month_events("2024-03-01", "2024-03-31")

    assert [r.id for r in rows] == ["maintenance:first", "emergency_visit:last"]


def test_rows_are_ordered_by_start(db):
    add_events(
        db,
        event_fields(id="emergency_visit:3", event_type="emergency_visit", start_at=datetime(2024, 3, 20, 9, 30)),
        event_fields(id="maintenance:1", start_at=datetime(2024, 3, 2)),
        event_fields(id="emergency_shift:2:2024-03-10", event_type="emergency_shift", start_at=datetime(2024, 3, 10, 8)),
    )

    rows = CalendarEventRepository(db).fetch_month_events("2024-03-01", "2024-03-31")

    assert [r.id for r in rows] == [
        "maintenance:1",
        "emergency_shift:2:2024-03-10",
        "emergency_visit:3",
    ]


def test_rows_are_typed(db):
    add_events(db, *SCENARIO_A)

    rows = CalendarEventRepository(db).fetch_month_events("2024-03-01", "2024-03-31")

    assert rows[0].event_type is CalendarEventType.MAINTENANCE
    assert rows[1].event_type is CalendarEventType.EMERGENCY_SHIFT
    assert rows[1].start_at == datetime(2024, 3, 10, 8, 0, 0)
    assert rows[1].end_at == datetime(2024, 3, 10, 20, 0, 0)
    assert rows[1].technician_id == "tech-7"


def test_empty_month_returns_empty_list(db):
    add_events(db, *SCENARIO_A)

    rows = CalendarEventRepository(db).fetch_month_events("2024-05-01", "2024-05-31")

    assert rows == []


def test_accepts_date_objects(db):
    add_events(db, *SCENARIO_A)

    rows = CalendarEventRepository(db).fetch_month_events(date(2024, 3, 1), date(2024, 3, 31))

    assert len(rows) == 2


@pytest.mark.parametrize(
    "month_start, month_end",
    [
        ("2024-03-31", "2024-03-01"),
        ("2024-3-1", "2024-03-31"),
        ("march", "2024-03-31"),
        ("2024-02-30", "2024-03-31"),
    ],
)
def test_invalid_range_is_rejected(db, month_start, month_end):
    with pytest.raises(ValueError):
        CalendarEventRepository(db).fetch_month_events(month_start, month_end)


def test_query_failure_raises_calendar_query_error(broken_engine):
    db = create_session_factory(broken_engine)()
    try:
        with pytest.raises(CalendarQueryError) as exc_info:
            CalendarEventRepository(db).fetch_month_events("2024-03-01", "2024-03-31")
    finally:
        db.close()

    assert exc_info.value.__cause__ is not None
    assert str(exc_info.value) == "Error consultando eventos del calendario"
    assert "SELECT" not in str(exc_info.value)


def test_sample_events_respects_limit(db):
    add_events(
        db,
        *[event_fields(id=f"maintenance:{i}", start_at=datetime(2024, 3, i + 1)) for i in range(8)],
    )

    rows = CalendarEventRepository(db).sample_events(limit=3)

    assert len(rows) == 3


def test_approved_absences_overlapping_month(db):
    add_absence(db, id="inside", start_date=date(2024, 3, 4), end_date=date(2024, 3, 6))
    add_absence(db, id="straddles-start", start_date=date(2024, 2, 27), end_date=date(2024, 3, 1))
    add_absence(db, id="straddles-end", start_date=date(2024, 3, 31), end_date=date(2024, 4, 3))
    add_absence(db, id="pending", start_date=date(2024, 3, 10), end_date=date(2024, 3, 12), status="pending")
    add_absence(db, id="outside", start_date=date(2024, 4, 10), end_date=date(2024, 4, 12))

    absences = CalendarEventRepository(db).fetch_approved_absences("2024-03-01", "2024-03-31")

    assert [(a.start_date, a.end_date) for a in absences] == [
        (date(2024, 2, 27), date(2024, 3, 1)),
        (date(2024, 3, 4), date(2024, 3, 6)),
        (date(2024, 3, 31), date(2024, 4, 3)),
    ]
