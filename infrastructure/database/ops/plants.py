"""Database operations for Plant entities."""

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING, Any

from app.domain.exceptions import RepositoryError
from app.domain.plant_entity import Plant
from app.utils.time import iso_now, to_iso

if TYPE_CHECKING:
    from sqlite3 import Connection

logger = logging.getLogger(__name__)


class PlantOperations:
    """Plant CRUD helpers for database handlers."""

    def get_db(self) -> "Connection":
        """Get database connection. Must be implemented by mixing class."""
        raise NotImplementedError("Subclass must implement get_db()")

    def insert_plant(self, plant: Plant) -> Plant:
        db = self.get_db()
        try:
            cursor = db.execute(
                """
                INSERT INTO Plants (
                    user_id, name, plant_type, location, watering_every_days,
                    fertilizer_every_weeks, last_watered_at, last_fertilized_at,
                    latitude, longitude, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    plant.user_id,
                    plant.name,
                    plant.plant_type,
                    plant.location.value,
                    plant.watering_every_days,
                    plant.fertilizer_every_weeks,
                    to_iso(plant.last_watered_at),
                    to_iso(plant.last_fertilized_at),
                    plant.latitude,
                    plant.longitude,
                    to_iso(plant.created_at),
                    to_iso(plant.updated_at),
                ),
            )
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Failed to create plant %r: %s", plant.name, exc)
            raise RepositoryError("Failed to create plant") from exc

        plant.plant_id = cursor.lastrowid
        return plant

    def get_plant(self, plant_id: int) -> Plant | None:
        try:
            row = self.get_db().execute("SELECT * FROM Plants WHERE plant_id = ?", (plant_id,)).fetchone()
        except sqlite3.Error as exc:
            logger.error("Failed to get plant %s: %s", plant_id, exc)
            raise RepositoryError("Failed to load plant") from exc
        return Plant.from_row(dict(row)) if row else None

    def list_plants(self, user_id: int) -> list[Plant]:
        try:
            rows = self.get_db().execute(
                "SELECT * FROM Plants WHERE user_id = ? ORDER BY name COLLATE NOCASE", (user_id,)
            ).fetchall()
        except sqlite3.Error as exc:
            logger.error("Failed to list plants for user %s: %s", user_id, exc)
            raise RepositoryError("Failed to list plants") from exc
        return [Plant.from_row(dict(row)) for row in rows]

    def update_plant(self, plant: Plant) -> bool:
        db = self.get_db()
        params: tuple[Any, ...] = (
            plant.name,
            plant.plant_type,
            plant.location.value,
            plant.watering_every_days,
            plant.fertilizer_every_weeks,
            to_iso(plant.last_watered_at),
            to_iso(plant.last_fertilized_at),
            plant.latitude,
            plant.longitude,
            iso_now(),
            plant.plant_id,
        )
        try:
            cursor = db.execute(
                """
                UPDATE Plants SET
                    name = ?, plant_type = ?, location = ?, watering_every_days = ?,
                    fertilizer_every_weeks = ?, last_watered_at = ?, last_fertilized_at = ?,
                    latitude = ?, longitude = ?, updated_at = ?
                WHERE plant_id = ?
                """,
                params,
            )
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Failed to update plant %s: %s", plant.plant_id, exc)
            raise RepositoryError("Failed to update plant") from exc
        return cursor.rowcount > 0

    def delete_plant(self, plant_id: int) -> bool:
        """Delete a plant. Reminders and care logs cascade."""
        db = self.get_db()
        try:
            cursor = db.execute("DELETE FROM Plants WHERE plant_id = ?", (plant_id,))
            db.commit()
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Failed to delete plant %s: %s", plant_id, exc)
            raise RepositoryError("Failed to delete plant") from exc
        return cursor.rowcount > 0
