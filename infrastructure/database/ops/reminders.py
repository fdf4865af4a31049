"""
Reminder Database Operations
============================

Database operations for the Reminders table. Each reminder is stored as a
JSON document alongside the columns used for filtering and ordering.
Implements the storage side of the ReminderRepository protocol.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.domain.exceptions import RepositoryError
from app.domain.reminders.reminder_entity import Reminder
from app.enums.reminders import ReminderStatus
from app.utils.time import to_iso

if TYPE_CHECKING:
    from sqlite3 import Connection

logger = logging.getLogger(__name__)

_OPEN_STATUSES = (
    ReminderStatus.PENDING.value,
    ReminderStatus.OVERDUE.value,
    ReminderStatus.SNOOZED.value,
)


class ReminderOperations:
    """Reminder CRUD helpers for database handlers."""

    def get_db(self) -> "Connection":
        """Get database connection. Must be implemented by mixing class."""
        raise NotImplementedError("Subclass must implement get_db()")

    @staticmethod
    def _reminder_columns(reminder: Reminder) -> tuple[Any, ...]:
        document = reminder.to_dict()
        document.pop("reminder_id", None)
        return (
            reminder.user_id,
            reminder.plant_id,
            reminder.parent_id,
            reminder.care_type.value,
            reminder.status.value,
            reminder.priority.value,
            to_iso(reminder.due_date),
            1 if reminder.is_recurring else 0,
            1 if reminder.is_active else 0,
            to_iso(reminder.notified_at),
            json.dumps(document),
            to_iso(reminder.created_at),
            to_iso(reminder.updated_at),
        )

    @staticmethod
    def _row_to_reminder(row: sqlite3.Row | dict[str, Any]) -> Reminder:
        data = dict(row)
        document = json.loads(data.get("document") or "{}")
        document["reminder_id"] = data["reminder_id"]
        document["parent_id"] = data.get("parent_id")
        document["plant_id"] = data.get("plant_id")
        return Reminder.from_dict(document)

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    def insert_reminder(self, reminder: Reminder) -> Reminder:
        """
        Insert a reminder.

        Returns:
            The same reminder with reminder_id assigned

        Raises:
            RepositoryError: On database failure
        """
        db = self.get_db()
        try:
            cursor = db.execute(
                """
                INSERT INTO Reminders (
                    user_id, plant_id, parent_id, care_type, status, priority,
                    due_date, is_recurring, is_active, notified_at, document,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._reminder_columns(reminder),
            )
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Error creating reminder for user %s: %s", reminder.user_id, exc)
            raise RepositoryError("Failed to create reminder") from exc

        reminder.reminder_id = cursor.lastrowid
        logger.info(
            "Created %s reminder %s (plant=%s, due=%s)",
            reminder.care_type.value,
            reminder.reminder_id,
            reminder.plant_id,
            to_iso(reminder.due_date),
        )
        return reminder

    def get_reminder(self, reminder_id: int) -> Reminder | None:
        db = self.get_db()
        try:
            row = db.execute("SELECT * FROM Reminders WHERE reminder_id = ?", (reminder_id,)).fetchone()
        except sqlite3.Error as exc:
            logger.error("Error fetching reminder %s: %s", reminder_id, exc)
            raise RepositoryError("Failed to load reminder") from exc
        return self._row_to_reminder(row) if row else None

    def update_reminder(self, reminder: Reminder) -> bool:
        """Overwrite a stored reminder. Returns False if the row does not exist."""
        if reminder.reminder_id is None:
            raise RepositoryError("Cannot update a reminder without reminder_id")
        db = self.get_db()
        columns = self._reminder_columns(reminder)
        try:
            cursor = db.execute(
                """
                UPDATE Reminders SET
                    user_id = ?, plant_id = ?, parent_id = ?, care_type = ?,
                    status = ?, priority = ?, due_date = ?, is_recurring = ?,
                    is_active = ?, notified_at = ?, document = ?,
                    created_at = ?, updated_at = ?
                WHERE reminder_id = ?
                """,
                (*columns, reminder.reminder_id),
            )
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Error updating reminder %s: %s", reminder.reminder_id, exc)
            raise RepositoryError("Failed to update reminder") from exc
        return cursor.rowcount > 0

    def delete_reminder(self, reminder_id: int) -> bool:
        """Delete a reminder; child occurrences cascade via parent_id."""
        db = self.get_db()
        try:
            cursor = db.execute("DELETE FROM Reminders WHERE reminder_id = ?", (reminder_id,))
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Error deleting reminder %s: %s", reminder_id, exc)
            raise RepositoryError("Failed to delete reminder") from exc
        return cursor.rowcount > 0

    # =========================================================================
    # Queries
    # =========================================================================

    def list_reminders(
        self,
        user_id: int,
        *,
        plant_id: int | None = None,
        care_type: str | None = None,
        is_recurring: bool | None = None,
        due_from: datetime | None = None,
        due_to: datetime | None = None,
    ) -> list[Reminder]:
        query = "SELECT * FROM Reminders WHERE user_id = ?"
        params: list[Any] = [user_id]

        if plant_id is not None:
            query += " AND plant_id = ?"
            params.append(plant_id)
        if care_type:
            query += " AND care_type = ?"
            params.append(care_type)
        if is_recurring is not None:
            query += " AND is_recurring = ?"
            params.append(1 if is_recurring else 0)
        if due_from is not None:
            query += " AND due_date >= ?"
            params.append(to_iso(due_from))
        if due_to is not None:
            query += " AND due_date <= ?"
            params.append(to_iso(due_to))

        query += " ORDER BY due_date ASC, reminder_id ASC"

        try:
            rows = self.get_db().execute(query, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("Error listing reminders for user %s: %s", user_id, exc)
            raise RepositoryError("Failed to list reminders") from exc
        return [self._row_to_reminder(row) for row in rows]

    def list_open_reminders(self, *, due_before: datetime | None = None) -> list[Reminder]:
        """Non-terminal reminders for every user, optionally due before a cutoff."""
        placeholders = ", ".join("?" for _ in _OPEN_STATUSES)
        query = f"SELECT * FROM Reminders WHERE status IN ({placeholders})"  # nosec B608
        params: list[Any] = list(_OPEN_STATUSES)
        if due_before is not None:
            query += " AND due_date <= ?"
            params.append(to_iso(due_before))
        query += " ORDER BY due_date ASC"

        try:
            rows = self.get_db().execute(query, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("Error listing open reminders: %s", exc)
            raise RepositoryError("Failed to list open reminders") from exc
        return [self._row_to_reminder(row) for row in rows]

    def find_active_reminder(self, user_id: int, plant_id: int, care_type: str) -> Reminder | None:
        placeholders = ", ".join("?" for _ in _OPEN_STATUSES)
        try:
            row = self.get_db().execute(
                f"""
                SELECT * FROM Reminders
                WHERE user_id = ? AND plant_id = ? AND care_type = ?
                  AND is_active = 1 AND status IN ({placeholders})
                ORDER BY due_date ASC
                LIMIT 1
                """,  # nosec B608
                (user_id, plant_id, care_type, *_OPEN_STATUSES),
            ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Error finding active %s reminder for plant %s: %s", care_type, plant_id, exc)
            raise RepositoryError("Failed to look up reminder") from exc
        return self._row_to_reminder(row) if row else None
