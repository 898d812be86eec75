"""Tests for date validation helpers and migration utilities."""

from datetime import date, datetime

import pytest

from liftops.shared.validators import parse_iso_date, validate_date_range
from migrations.create_calendar_events_view import CREATE_VIEW_SQL
from run_migration import split_statements


def test_parse_iso_date():
    assert parse_iso_date("2024-03-01") == date(2024, 3, 1)
    assert parse_iso_date(" 2024-03-01 ") == date(2024, 3, 1)
    assert parse_iso_date(date(2024, 3, 1)) == date(2024, 3, 1)
    assert parse_iso_date(datetime(2024, 3, 1, 15, 30)) == date(2024, 3, 1)


@pytest.mark.parametrize("value", ["2024-3-1", "2024-03-01T00:00:00", "", "2024-13-01", None, 20240301])
def test_parse_iso_date_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_iso_date(value)


def test_single_day_range_is_valid():
    assert validate_date_range("2024-03-01", "2024-03-01") == (date(2024, 3, 1), date(2024, 3, 1))


def test_inverted_range_is_invalid():
    with pytest.raises(ValueError):
        validate_date_range("2024-03-02", "2024-03-01")


def test_view_sql_unions_all_sources():
    assert "v_calendar_events_month" in CREATE_VIEW_SQL
    assert CREATE_VIEW_SQL.count("UNION ALL") == 2
    for prefix in ("'maintenance:'", "'emergency_shift:'", "'emergency_visit:'"):
        assert prefix in CREATE_VIEW_SQL


def test_split_statements_skips_comments():
    sql = """
    -- create view
    CREATE VIEW a AS SELECT 1;
    -- only a comment;
    DROP VIEW IF EXISTS b;
    """

    assert split_statements(sql) == ["CREATE VIEW a AS SELECT 1", "DROP VIEW IF EXISTS b"]
