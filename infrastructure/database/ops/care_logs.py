"""Database operations for CareLog entities."""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import TYPE_CHECKING, Any

from app.domain.care_log_entity import CareLog
from app.domain.exceptions import RepositoryError
from app.utils.time import to_iso

if TYPE_CHECKING:
    from sqlite3 import Connection

logger = logging.getLogger(__name__)


class CareLogOperations:
    """Care log helpers for database handlers."""

    def get_db(self) -> "Connection":
        """Get database connection. Must be implemented by mixing class."""
        raise NotImplementedError("Subclass must implement get_db()")

    @staticmethod
    def _row_to_care_log(row: sqlite3.Row) -> CareLog:
        data = dict(row)
        return CareLog(
            care_log_id=data["care_log_id"],
            user_id=data["user_id"],
            plant_id=data["plant_id"],
            care_type=data["care_type"],
            notes=data.get("notes"),
            care_data=json.loads(data["care_data"]) if data.get("care_data") else {},
            reminder_id=data.get("reminder_id"),
            performed_at=data.get("performed_at"),
            created_at=data.get("created_at"),
        )

    def insert_care_log(self, log: CareLog) -> CareLog:
        db = self.get_db()
        try:
            cursor = db.execute(
                """
                INSERT INTO CareLogs (
                    user_id, plant_id, care_type, notes, care_data,
                    reminder_id, performed_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    log.user_id,
                    log.plant_id,
                    log.care_type.value,
                    log.notes,
                    json.dumps(log.care_data) if log.care_data else None,
                    log.reminder_id,
                    to_iso(log.performed_at),
                    to_iso(log.created_at),
                ),
            )
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Failed to create care log for plant %s: %s", log.plant_id, exc)
            raise RepositoryError("Failed to create care log") from exc

        log.care_log_id = cursor.lastrowid
        return log

    def get_care_log(self, care_log_id: int) -> CareLog | None:
        try:
            row = self.get_db().execute(
                "SELECT * FROM CareLogs WHERE care_log_id = ?", (care_log_id,)
            ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Failed to get care log %s: %s", care_log_id, exc)
            raise RepositoryError("Failed to load care log") from exc
        return self._row_to_care_log(row) if row else None

    def list_care_logs(
        self,
        user_id: int,
        *,
        plant_id: int | None = None,
        care_type: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[CareLog]:
        query = "SELECT * FROM CareLogs WHERE user_id = ?"
        params: list[Any] = [user_id]
        if plant_id is not None:
            query += " AND plant_id = ?"
            params.append(plant_id)
        if care_type:
            query += " AND care_type = ?"
            params.append(care_type)
        query += " ORDER BY performed_at DESC, care_log_id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        try:
            rows = self.get_db().execute(query, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("Failed to list care logs for user %s: %s", user_id, exc)
            raise RepositoryError("Failed to list care logs") from exc
        return [self._row_to_care_log(row) for row in rows]

    def delete_care_log(self, care_log_id: int) -> bool:
        db = self.get_db()
        try:
            cursor = db.execute("DELETE FROM CareLogs WHERE care_log_id = ?", (care_log_id,))
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Failed to delete care log %s: %s", care_log_id, exc)
            raise RepositoryError("Failed to delete care log") from exc
        return cursor.rowcount > 0
