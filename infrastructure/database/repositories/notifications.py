"""Notification repository over NotificationOperations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from infrastructure.database.ops.notifications import NotificationOperations


class NotificationRepository:
    def __init__(self, backend: "NotificationOperations") -> None:
        self._backend = backend

    def create_message(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> int:
        return self._backend.insert_notification(user_id, notification_type, title, message, data)

    def get_user_messages(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        return self._backend.list_notifications(user_id, unread_only=unread_only, limit=limit, offset=offset)

    def get_message(self, notification_id: int) -> dict[str, Any] | None:
        return self._backend.get_notification(notification_id)

    def mark_as_read(self, notification_id: int) -> bool:
        """False if the notification is unknown or already read."""
        return self._backend.mark_notification_read(notification_id)
