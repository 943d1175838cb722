"""API routes for calendar preferences."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from dashboard_engine.routers.engine import get_preferences_service
from dashboard_engine.schemas.calendar_preferences import (
    CalendarPreferences,
    CalendarPreferencesUpdate,
)
from dashboard_engine.services.calendar_preferences import CalendarPreferencesService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/calendar", tags=["Calendar Preferences"])


@router.get("/preferences", response_model=CalendarPreferences)
async def get_preferences(
    service: CalendarPreferencesService = Depends(get_preferences_service),
) -> CalendarPreferences:
    """Get current calendar preferences."""
    try:
        return service.get_preferences()
    except Exception as e:
        logger.error(f"Failed to get calendar preferences: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/preferences", response_model=CalendarPreferences)
async def update_preferences(
    update: CalendarPreferencesUpdate,
    request: Request,
    service: CalendarPreferencesService = Depends(get_preferences_service),
) -> CalendarPreferences:
    """Update calendar preferences."""
    try:
        preferences = service.update_preferences(update)
    except Exception as e:
        logger.error(f"Failed to update calendar preferences: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    clock = getattr(request.app.state, "dashboard_clock", None)
    if clock is not None and "timezone" in update.model_fields_set:
        clock.set_timezone(preferences.timezone)
    return preferences
