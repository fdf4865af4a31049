"""
Reminder CRUD Operations
========================

Endpoints for creating, listing, reading, updating and deleting reminders.
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
from app.schemas import CreateReminderRequest, PaginationMeta, ReminderListQuery, UpdateReminderRequest
from app.utils.http import safe_route

from . import reminders_api

logger = logging.getLogger("reminders_api.crud")


@reminders_api.post("")
@safe_route("Failed to create reminder")
def create_reminder() -> Response:
    """
    Create a reminder.

    Without ``dueDate`` the due date is computed from the frequency, the
    plant's last care date and the current season.
    """
    body = parse_body(CreateReminderRequest)
    reminder = _reminder_service().create_reminder(get_user_id(), body.model_dump(exclude_none=True))
    return _success(reminder.to_dict(), 201, message="Reminder created")


@reminders_api.get("")
@safe_route("Failed to list reminders")
def list_reminders() -> Response:
    """
    List reminders.

    Query params: status, plantId, careType, priority, dateFrom, dateTo,
    isRecurring, sortBy (dueDate|createdAt|priority), sortOrder, page, limit
    """
    query = parse_query(ReminderListQuery)
    reminders, total = _reminder_service().list_reminders(
        get_user_id(),
        status=query.status.value if query.status else None,
        plant_id=query.plant_id,
        care_type=query.care_type.value if query.care_type else None,
        priority=query.priority.value if query.priority else None,
        date_from=query.date_from,
        date_to=query.date_to,
        is_recurring=query.is_recurring,
        sort_by=query.sort_field,
        sort_order=query.sort_order,
        page=query.page,
        limit=query.limit,
    )
    return _success(
        {
            "reminders": [r.to_dict() for r in reminders],
            "pagination": PaginationMeta.build(query.page, query.limit, total).model_dump(),
        }
    )


@reminders_api.get("/<int:reminder_id>")
@safe_route("Failed to get reminder")
def get_reminder(reminder_id: int) -> Response:
    reminder = _reminder_service().get_reminder(get_user_id(), reminder_id)
    return _success(reminder.to_dict())


@reminders_api.put("/<int:reminder_id>")
@safe_route("Failed to update reminder")
def update_reminder(reminder_id: int) -> Response:
    body = parse_body(UpdateReminderRequest)
    reminder = _reminder_service().update_reminder(
        get_user_id(), reminder_id, body.model_dump(exclude_unset=True)
    )
    return _success(reminder.to_dict(), message="Reminder updated")


@reminders_api.delete("/<int:reminder_id>")
@safe_route("Failed to delete reminder")
def delete_reminder(reminder_id: int) -> Response:
    """Delete a reminder and the occurrences generated from it."""
    _reminder_service().delete_reminder(get_user_id(), reminder_id)
    return _success({"reminder_id": reminder_id}, message="Reminder deleted")
