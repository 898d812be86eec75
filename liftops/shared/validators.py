"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Union

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: Union[str, date]) -> date:
    """
    Parse a calendar date in ``YYYY-MM-DD`` form.

    Args:
        value: ISO date string, or a date which is returned unchanged

    Returns:
        The parsed date

    Raises:
        ValueError: If the value is not a valid ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value.strip()):
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")

    return date.fromisoformat(value.strip())


def validate_date_range(start: Union[str, date], end: Union[str, date]) -> tuple[date, date]:
    """
    Validate an inclusive date range.

    Raises:
        ValueError: If either bound is malformed or start is after end
    """
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)

    if start_date > end_date:
        raise ValueError(f"Range start {start_date.isoformat()} is after end {end_date.isoformat()}")

    return start_date, end_date
