"""
Create the unified calendar view v_calendar_events_month

Unions three sources into one row shape with a discriminator column:
- maintenance_schedules  → one whole-day row per schedule     (id "maintenance:<id>")
- emergency_shifts       → one row per covered day of a shift (id "emergency_shift:<id>:<YYYY-MM-DD>")
- emergency_visits       → one timed row per visit            (id "emergency_visit:<id>")

Run with: python migrations/create_calendar_events_view.py
Rollback: python migrations/create_calendar_events_view.py --down
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text

from liftops.config import CALENDAR_EVENTS_VIEW
from liftops.database import create_db_engine

CREATE_VIEW_SQL = f"""
CREATE OR REPLACE VIEW {CALENDAR_EVENTS_VIEW} AS
SELECT
    'maintenance:' || ms.id::text                       AS id,
    'maintenance'::text                                 AS event_type,
    ms.id::text                                         AS source_id,
    COALESCE(c.building_name, 'Mantención')             AS title,
    ms.status::text                                     AS status,
    ms.scheduled_date                                   AS event_date,
    ms.scheduled_date::timestamp                        AS start_at,
    ms.scheduled_date::timestamp + interval '23 hours 59 minutes 59 seconds' AS end_at,
    ms.client_id::text                                  AS client_id,
    c.building_name                                     AS building_name,
    ms.assigned_technician_id::text                     AS technician_id,
    NULL::boolean                                       AS is_external,
    NULL::text                                          AS external_personnel_name
FROM maintenance_schedules ms
LEFT JOIN clients c ON c.id = ms.client_id

UNION ALL

SELECT
    'emergency_shift:' || es.id::text || ':' || to_char(d.day, 'YYYY-MM-DD') AS id,
    'emergency_shift'::text                             AS event_type,
    es.id::text                                         AS source_id,
    CASE
        WHEN es.technician_id IS NULL THEN 'Turno emergencia (externo)'
        ELSE 'Turno emergencia'
    END                                                 AS title,
    es.shift_type::text                                 AS status,
    d.day::date                                         AS event_date,
    d.day::date + COALESCE(es.shift_start_time, time '00:00:00') AS start_at,
    d.day::date + COALESCE(es.shift_end_time, time '23:59:59')   AS end_at,
    NULL::text                                          AS client_id,
    NULL::text                                          AS building_name,
    es.technician_id::text                              AS technician_id,
    (es.technician_id IS NULL AND es.external_personnel_name IS NOT NULL) AS is_external,
    es.external_personnel_name                          AS external_personnel_name
FROM emergency_shifts es
CROSS JOIN LATERAL generate_series(
    es.shift_start_date::timestamp, es.shift_end_date::timestamp, interval '1 day'
) AS d(day)

UNION ALL

SELECT
    'emergency_visit:' || ev.id::text                   AS id,
    'emergency_visit'::text                             AS event_type,
    ev.id::text                                         AS source_id,
    COALESCE(ev.building_name, 'Visita emergencia')     AS title,
    ev.status::text                                     AS status,
    ev.visit_date                                       AS event_date,
    ev.visit_date + COALESCE(ev.visit_time, time '00:00:00')      AS start_at,
    COALESCE(
        ev.completed_at,
        ev.visit_date + COALESCE(ev.visit_time, time '00:00:00') + interval '1 hour'
    )                                                   AS end_at,
    ev.client_id::text                                  AS client_id,
    ev.building_name                                    AS building_name,
    ev.technician_id::text                              AS technician_id,
    NULL::boolean                                       AS is_external,
    NULL::text                                          AS external_personnel_name
FROM emergency_visits ev
"""


def upgrade():
    """Create or replace the unified calendar view"""
    engine = create_db_engine()
    with engine.connect() as conn:
        conn.execute(text(CREATE_VIEW_SQL))
        conn.commit()
        print(f"✅ View {CALENDAR_EVENTS_VIEW} created")


def downgrade():
    """Drop the unified calendar view"""
    engine = create_db_engine()
    with engine.connect() as conn:
        conn.execute(text(f"DROP VIEW IF EXISTS {CALENDAR_EVENTS_VIEW}"))
        conn.commit()
        print(f"✅ View {CALENDAR_EVENTS_VIEW} dropped")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Manage the unified calendar view")
    parser.add_argument("--down", action="store_true", help="Drop the view")
    args = parser.parse_args()

    if args.down:
        print("Rolling back migration...")
        downgrade()
    else:
        print("Running migration...")
        upgrade()
