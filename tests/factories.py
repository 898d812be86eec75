"""Row factories for calendar tests."""

from datetime import date, datetime

from liftops.domain.scheduling.schemas import CalendarEventRow
from liftops.models import CalendarEvent, TechnicianAbsence


def event_fields(
    *,
    id: str = "maintenance:1",
    event_type: str = "maintenance",
    source_id: str | None = None,
    title: str = "Mantención Edificio Alameda",
    status: str | None = "scheduled",
    start_at: datetime = datetime(2024, 3, 5, 0, 0, 0),
    end_at: datetime | None = None,
    event_date: date | None = None,
    client_id: str | None = None,
    building_name: str | None = None,
    technician_id: str | None = None,
    is_external: bool | None = None,
    external_personnel_name: str | None = None,
) -> dict:
    return {
        "id": id,
        "event_type": event_type,
        "source_id": source_id or id.split(":")[1],
        "title": title,
        "status": status,
        "event_date": event_date or start_at.date(),
        "start_at": start_at,
        "end_at": end_at or start_at,
        "client_id": client_id,
        "building_name": building_name,
        "technician_id": technician_id,
        "is_external": is_external,
        "external_personnel_name": external_personnel_name,
    }


def make_row(**overrides) -> CalendarEventRow:
    return CalendarEventRow(**event_fields(**overrides))


def add_events(db, *events: dict) -> None:
    for fields in events:
        db.add(CalendarEvent(**fields))
    db.commit()


def add_absence(
    db,
    *,
    id: str,
    start_date: date,
    end_date: date,
    status: str = "approved",
    technician_id: str = "tech-1",
) -> None:
    db.add(
        TechnicianAbsence(
            id=id,
            technician_id=technician_id,
            start_date=start_date,
            end_date=end_date,
            absence_type="vacation",
            status=status,
        )
    )
    db.commit()


SCENARIO_A = [
    event_fields(id="maintenance:1", event_type="maintenance", start_at=datetime(2024, 3, 5, 0, 0, 0)),
    event_fields(
        id="emergency_shift:2:2024-03-10",
        event_type="emergency_shift",
        title="Turno emergencia",
        status="24x7",
        start_at=datetime(2024, 3, 10, 8, 0, 0),
        end_at=datetime(2024, 3, 10, 20, 0, 0),
        technician_id="tech-7",
    ),
]
