"""
Scheduling domain - unified monthly calendar.

Merges maintenance schedules, emergency shift rosters and emergency visit
records (through the v_calendar_events_month view) into one read-only,
time-ordered calendar.
"""

from .router import router

__all__ = ["router"]
