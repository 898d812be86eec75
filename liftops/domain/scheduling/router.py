"""Calendar router - FastAPI endpoints for the scheduling calendar"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...config import DIAGNOSTIC_SAMPLE_LIMIT
from ...database import get_db
from .schemas import (
    CalendarView,
    DiagnosticsResponse,
    EventDetailResponse,
    MonthCalendarResponse,
    NavigateAction,
    NavigateResponse,
)
from .service import CalendarService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["Calendar"])


def get_calendar_service(db: Session = Depends(get_db)) -> CalendarService:
    """Dependency injection for CalendarService"""
    return CalendarService(db)


@router.get("/month", response_model=MonthCalendarResponse)
async def get_month_calendar(
    month_start: str = Query(..., description="First day of the month (YYYY-MM-DD)"),
    month_end: str = Query(..., description="Last day of the month (YYYY-MM-DD)"),
    anchor: Optional[date] = Query(None, alias="date"),
    view: CalendarView = Query(CalendarView.MONTH),
    service: CalendarService = Depends(get_calendar_service),
):
    """Unified month summary: maintenance, emergency shifts and emergency visits"""
    return await service.get_month(month_start, month_end, anchor, view)


@router.get("/month/events/{event_id}", response_model=EventDetailResponse)
async def get_event_detail(
    event_id: str,
    month_start: str = Query(...),
    month_end: str = Query(...),
    service: CalendarService = Depends(get_calendar_service),
):
    """Detail panel for a selected event"""
    return await service.get_event_detail(event_id, month_start, month_end)


@router.get("/navigate", response_model=NavigateResponse)
async def navigate_calendar(
    anchor: str = Query(..., alias="date"),
    view: CalendarView = Query(CalendarView.MONTH),
    action: NavigateAction = Query(...),
    target: Optional[str] = Query(None),
):
    """Move the calendar and return the month range to load next"""
    return CalendarService.navigate(anchor, view, action, target)


@router.get("/diagnostics", response_model=DiagnosticsResponse)
async def calendar_diagnostics(
    limit: int = Query(DIAGNOSTIC_SAMPLE_LIMIT, ge=1, le=100),
    service: CalendarService = Depends(get_calendar_service),
):
    """Peek at the unified view to check it is reachable"""
    return await service.diagnostics(limit)
