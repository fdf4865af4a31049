"""
Notifications API
=================

In-app notifications produced by the reminder workflow.
"""

from __future__ import annotations

from flask import Blueprint, Response

from app.blueprints.api._common import (
    get_notifications_service as _notifications_service,
    get_user_id,
    parse_query,
    register_error_handlers,
    success as _success,
)
from app.schemas import NotificationListQuery
from app.utils.http import safe_route

notifications_api = Blueprint("notifications_api", __name__)
register_error_handlers(notifications_api)


@notifications_api.get("")
@safe_route("Failed to get notifications")
def list_notifications() -> Response:
    """Query params: unreadOnly, limit, offset"""
    query = parse_query(NotificationListQuery)
    notifications = _notifications_service().get_user_notifications(
        get_user_id(),
        unread_only=query.unread_only,
        limit=query.limit,
        offset=query.offset,
    )
    return _success({"notifications": notifications, "count": len(notifications)})


@notifications_api.post("/<int:notification_id>/read")
@safe_route("Failed to mark notification as read")
def mark_notification_read(notification_id: int) -> Response:
    notification = _notifications_service().mark_as_read(get_user_id(), notification_id)
    return _success(notification)
