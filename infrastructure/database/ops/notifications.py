"""
Notification Database Operations
================================

Storage for in-app notifications. Rows are returned as plain dicts with
``data`` decoded from JSON and ``is_read`` as a bool, ready for the API.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import TYPE_CHECKING, Any

from app.domain.exceptions import RepositoryError
from app.utils.time import iso_now

if TYPE_CHECKING:
    from sqlite3 import Connection

logger = logging.getLogger(__name__)


class NotificationOperations:
    """Notification helpers for database handlers."""

    def get_db(self) -> "Connection":
        """Get database connection. Must be implemented by mixing class."""
        raise NotImplementedError("Subclass must implement get_db()")

    @staticmethod
    def _row_to_notification(row: sqlite3.Row) -> dict[str, Any]:
        record = dict(row)
        record["is_read"] = bool(record.get("is_read"))
        record["data"] = json.loads(record["data"]) if record.get("data") else {}
        return record

    def insert_notification(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        data: dict[str, Any] | None = None,
    ) -> int:
        db = self.get_db()
        try:
            cursor = db.execute(
                """
                INSERT INTO Notifications (user_id, notification_type, title, message, data, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, notification_type, title, message, json.dumps(data) if data else None, iso_now()),
            )
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Error storing %s notification for user %s: %s", notification_type, user_id, exc)
            raise RepositoryError("Failed to store notification") from exc
        return cursor.lastrowid

    def list_notifications(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """A user's notifications, newest first."""
        query = "SELECT * FROM Notifications WHERE user_id = ?"
        if unread_only:
            query += " AND is_read = 0"
        query += " ORDER BY created_at DESC, notification_id DESC LIMIT ? OFFSET ?"

        try:
            rows = self.get_db().execute(query, (user_id, limit, offset)).fetchall()
        except sqlite3.Error as exc:
            logger.error("Error listing notifications for user %s: %s", user_id, exc)
            raise RepositoryError("Failed to list notifications") from exc
        return [self._row_to_notification(row) for row in rows]

    def get_notification(self, notification_id: int) -> dict[str, Any] | None:
        try:
            row = self.get_db().execute(
                "SELECT * FROM Notifications WHERE notification_id = ?", (notification_id,)
            ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Error fetching notification %s: %s", notification_id, exc)
            raise RepositoryError("Failed to load notification") from exc
        return self._row_to_notification(row) if row else None

    def mark_notification_read(self, notification_id: int) -> bool:
        db = self.get_db()
        try:
            cursor = db.execute(
                "UPDATE Notifications SET is_read = 1, read_at = ? WHERE notification_id = ? AND is_read = 0",
                (iso_now(), notification_id),
            )
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Error marking notification %s read: %s", notification_id, exc)
            raise RepositoryError("Failed to update notification") from exc
        return cursor.rowcount > 0
