"""
Reminder Actions
================

State transitions on reminders: complete, snooze, dismiss and bulk.
"""

from __future__ import annotations

import logging

from flask import Response

from app.blueprints.api._common import (
    get_reminder_service as _reminder_service,
    get_user_id,
    parse_body,
    success as _success,
)
from app.schemas import BulkReminderRequest, CompleteReminderRequest, SnoozeReminderRequest
from app.utils.http import safe_route

from . import reminders_api

logger = logging.getLogger("reminders_api.actions")


@reminders_api.post("/<int:reminder_id>/complete")
@safe_route("Failed to complete reminder")
def complete_reminder(reminder_id: int) -> Response:
    """
    Mark a reminder as done.

    Request body (optional):
        {"notes": str, "createCareLog": bool}

    Returns:
        {
            "reminder": {...},
            "next_reminder": {...} | null,
            "care_log": {...} | null,
            "completion": {"was_on_time": bool, "days_overdue": int, ...}
        }
    """
    body = parse_body(CompleteReminderRequest)
    result = _reminder_service().complete_reminder(
        get_user_id(),
        reminder_id,
        notes=body.notes,
        create_care_log=body.create_care_log,
    )
    next_reminder = result["next_reminder"]
    care_log = result["care_log"]
    return _success(
        {
            "reminder": result["reminder"].to_dict(),
            "next_reminder": next_reminder.to_dict() if next_reminder else None,
            "care_log": care_log.to_dict() if care_log else None,
            "completion": result["completion"].to_dict(),
        },
        message="Reminder completed",
    )


@reminders_api.post("/<int:reminder_id>/snooze")
@safe_route("Failed to snooze reminder")
def snooze_reminder(reminder_id: int) -> Response:
    """
    Push a reminder back by ``hours`` (default 24, max 168).

    Returns 409 once the reminder's snooze cap is reached.
    """
    body = parse_body(SnoozeReminderRequest)
    reminder = _reminder_service().snooze_reminder(get_user_id(), reminder_id, body.hours, body.reason)
    return _success(reminder.to_dict(), message=f"Reminder snoozed for {body.hours} hours")


@reminders_api.post("/<int:reminder_id>/dismiss")
@safe_route("Failed to dismiss reminder")
def dismiss_reminder(reminder_id: int) -> Response:
    reminder = _reminder_service().dismiss_reminder(get_user_id(), reminder_id)
    return _success(reminder.to_dict(), message="Reminder dismissed")


@reminders_api.post("/bulk")
@safe_route("Failed to process bulk operation")
def bulk_operation() -> Response:
    """
    Apply one operation to up to 50 reminders.

    Request body:
        {"reminderIds": [int], "operation": "delete|complete|snooze|dismiss",
         "hours": int, "reason": str}
    """
    body = parse_body(BulkReminderRequest)
    result = _reminder_service().bulk(
        get_user_id(),
        body.reminder_ids,
        body.operation,
        hours=body.hours,
        reason=body.reason,
    )
    logger.info(
        "Bulk %s: %d succeeded, %d failed",
        body.operation,
        len(result["succeeded"]),
        len(result["failed"]),
    )
    return _success(result)
