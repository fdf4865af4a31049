"""
Reminder Views & Smart Scheduling
=================================

Endpoints for:
- Upcoming and overdue views
- Reminder statistics
- Smart scheduling from a plant's care config, season and weather
- Weather-driven adjustment of pending watering reminders
"""

from __future__ import annotations

import logging

from flask import Response

from app.blueprints.api._common import (
    get_reminder_service as _reminder_service,
    get_user_id,
    parse_body,
    parse_query,
    success as _success,
)
from app.schemas import SmartScheduleRequest, UpcomingQuery, WeatherAdjustRequest
from app.utils.http import safe_route

from . import reminders_api

logger = logging.getLogger("reminders_api.smart")


# ============================================================================
# VIEWS
# ============================================================================


@reminders_api.get("/upcoming")
@safe_route("Failed to get upcoming reminders")
def upcoming_reminders() -> Response:
    """Open reminders due in the next ``days`` days (1-30, default 7)."""
    query = parse_query(UpcomingQuery)
    reminders = _reminder_service().upcoming(get_user_id(), query.days)
    return _success({"reminders": [r.to_dict() for r in reminders], "count": len(reminders), "days": query.days})


@reminders_api.get("/overdue")
@safe_route("Failed to get overdue reminders")
def overdue_reminders() -> Response:
    """Overdue reminders, most urgent first."""
    reminders = _reminder_service().overdue(get_user_id())
    return _success({"reminders": [r.to_dict() for r in reminders], "count": len(reminders)})


@reminders_api.get("/stats")
@safe_route("Failed to get reminder statistics")
def reminder_stats() -> Response:
    return _success(_reminder_service().stats(get_user_id()))


# ============================================================================
# SMART SCHEDULING
# ============================================================================


@reminders_api.post("/smart-schedule")
@safe_route("Failed to generate smart schedule")
def smart_schedule() -> Response:
    """
    Create reminders for a plant from its care configuration.

    Request body:
        {"plantId": int, "careTypes": ["watering", ...],
         "considerWeather": bool, "considerSeason": bool}

    Returns:
        {"created": [...], "skipped": [{"care_type", "reason"}],
         "season": str | null, "weather": {...} | null}
    """
    body = parse_body(SmartScheduleRequest)
    result = _reminder_service().smart_schedule(
        get_user_id(),
        body.plant_id,
        [care_type.value for care_type in body.care_types],
        consider_weather=body.consider_weather,
        consider_season=body.consider_season,
    )
    result["created"] = [r.to_dict() for r in result["created"]]
    status = 201 if result["created"] else 200
    return _success(result, status, message=f"{len(result['created'])} reminder(s) scheduled")


@reminders_api.post("/weather-adjust")
@safe_route("Failed to apply weather adjustments")
def weather_adjust() -> Response:
    """
    Apply current weather to pending future watering reminders.

    Each reminder is adjusted at most once. Returns 502 when the weather
    service is unavailable.
    """
    body = parse_body(WeatherAdjustRequest)
    result = _reminder_service().weather_adjust(get_user_id(), body.plant_id)
    return _success(
        {
            "checked": result["checked"],
            "adjusted": [r.to_dict() for r in result["adjusted"]],
        },
        message=f"{len(result['adjusted'])} reminder(s) adjusted",
    )
