"""
Notification Service
====================

In-app notifications for the reminder workflow: persisted to the database and
pushed over Socket.IO to the user's room.

Dispatch is fire-and-forget. The reminder operation that triggered a
notification has already been committed, so every failure here is logged and
swallowed.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from app.constants import Pagination
from app.domain.exceptions import NotFoundError
from app.enums import NotificationType

if TYPE_CHECKING:
    from app.domain.reminders import Reminder
    from app.utils.emitters import EmitterService
    from infrastructure.database.repositories.notifications import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationsService:
    """
    Notification service for user alerts.

    Supports:
    - Persisted in-app notifications
    - Real-time delivery via WebSocket (EmitterService)
    """

    def __init__(
        self,
        notification_repo: "NotificationRepository",
        emitter_service: Optional["EmitterService"] = None,
    ):
        """
        Initialize NotificationsService.

        Args:
            notification_repo: Repository for notification data.
            emitter_service: Optional emitter for WebSocket notifications.
        """
        self._repo = notification_repo
        self._emitter = emitter_service

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def send(
        self,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> int | None:
        """
        Persist and emit a notification. Never raises.

        Returns:
            Notification id, or None if it could not be stored
        """
        try:
            notification_id = self._repo.create_message(
                user_id=user_id,
                notification_type=notification_type.value,
                title=title,
                message=message,
                data=data,
            )
        except Exception as exc:
            logger.warning("Failed to store %s notification for user %s: %s", notification_type, user_id, exc)
            return None

        if notification_id is None:
            logger.warning("Notification for user %s was not stored", user_id)
            return None

        if self._emitter is not None:
            self._emitter.emit_notification(
                user_id,
                {
                    "notification_id": notification_id,
                    "type": notification_type.value,
                    "title": title,
                    "message": message,
                    "data": data or {},
                },
            )
        return notification_id

    def notify_reminder_created(self, reminder: "Reminder") -> int | None:
        return self.send(
            reminder.user_id,
            NotificationType.REMINDER_CREATED,
            "Care reminder scheduled",
            f"{reminder.title} is due {reminder.due_date:%Y-%m-%d}",
            {"reminder_id": reminder.reminder_id, "plant_id": reminder.plant_id},
        )

    def notify_reminder_completed(self, reminder: "Reminder", next_reminder: "Reminder | None") -> int | None:
        message = f"{reminder.title} marked as done"
        if next_reminder is not None:
            message += f"; next due {next_reminder.due_date:%Y-%m-%d}"
        return self.send(
            reminder.user_id,
            NotificationType.REMINDER_COMPLETED,
            "Care completed",
            message,
            {
                "reminder_id": reminder.reminder_id,
                "next_reminder_id": next_reminder.reminder_id if next_reminder else None,
            },
        )

    def notify_reminder_due(self, reminder: "Reminder") -> int | None:
        return self.send(
            reminder.user_id,
            NotificationType.REMINDER_DUE,
            "Plant care due",
            f"{reminder.title} is due now",
            {"reminder_id": reminder.reminder_id, "plant_id": reminder.plant_id},
        )

    def notify_schedule_adjusted(self, reminder: "Reminder") -> int | None:
        return self.send(
            reminder.user_id,
            NotificationType.SCHEDULE_ADJUSTED,
            "Watering schedule adjusted",
            reminder.environmental_factors.adjustment_reason or "Schedule adjusted for weather",
            {"reminder_id": reminder.reminder_id, "due_date": reminder.due_date.isoformat()},
        )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_user_notifications(
        self,
        user_id: int,
        unread_only: bool = False,
        limit: int = Pagination.NOTIFICATIONS_DEFAULT,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        return self._repo.get_user_messages(user_id, unread_only=unread_only, limit=limit, offset=offset)

    def mark_as_read(self, user_id: int, notification_id: int) -> dict[str, Any]:
        """
        Mark one of the user's notifications as read.

        Raises:
            NotFoundError: Unknown id or owned by another user
        """
        message = self._repo.get_message(notification_id)
        if not message or message.get("user_id") != user_id:
            raise NotFoundError(f"Notification {notification_id} not found")
        self._repo.mark_as_read(notification_id)
        message["is_read"] = True
        return message
