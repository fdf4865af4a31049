"""
Plant Service
=============

Owner-scoped plant registry. Provides the care configuration (frequencies and
last-care dates) the reminder scheduler reads. Deleting a plant cascades its
reminders and care logs at the database level.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.domain.exceptions import NotFoundError, RepositoryError, ValidationError
from app.domain.plant_entity import Plant
from app.enums.reminders import CareType
from app.utils.time import coerce_datetime, utc_now

if TYPE_CHECKING:
    from infrastructure.database.repositories.plants import PlantRepository

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "plant_type",
        "location",
        "watering_every_days",
        "fertilizer_every_weeks",
        "last_watered_at",
        "last_fertilized_at",
        "latitude",
        "longitude",
    }
)
_DATETIME_FIELDS = frozenset({"last_watered_at", "last_fertilized_at"})


class PlantService:
    """Plant CRUD for a single owner at a time."""

    def __init__(self, plant_repo: "PlantRepository") -> None:
        self._repo = plant_repo

    def create_plant(self, user_id: int, name: str, **fields: Any) -> Plant:
        if not name or not name.strip():
            raise ValidationError("Plant name is required")
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown plant fields: {', '.join(sorted(unknown))}")

        values = {key: value for key, value in fields.items() if value is not None}
        for key in _DATETIME_FIELDS & values.keys():
            values[key] = coerce_datetime(values[key])

        plant = Plant(user_id=user_id, name=name.strip(), **values)
        created = self._repo.create(plant)
        logger.info("Registered plant %s (%s) for user %s", created.plant_id, created.name, user_id)
        return created

    def list_plants(self, user_id: int) -> list[Plant]:
        return self._repo.list_for_user(user_id)

    def get_plant(self, user_id: int, plant_id: int) -> Plant:
        """
        Load a plant owned by ``user_id``.

        Raises:
            NotFoundError: Unknown id or owned by another user
        """
        plant = self._repo.get_by_id(plant_id)
        if plant is None or plant.user_id != user_id:
            raise NotFoundError(f"Plant {plant_id} not found")
        return plant

    def update_plant(self, user_id: int, plant_id: int, changes: dict[str, Any]) -> Plant:
        plant = self.get_plant(user_id, plant_id)
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown plant fields: {', '.join(sorted(unknown))}")

        for key, value in changes.items():
            if value is None and key in ("name", "location"):
                continue
            if key in _DATETIME_FIELDS:
                value = coerce_datetime(value)
            setattr(plant, key, value)
        plant.__post_init__()
        plant.updated_at = utc_now()

        if not self._repo.update(plant):
            raise RepositoryError(f"Plant {plant_id} could not be updated")
        return plant

    def delete_plant(self, user_id: int, plant_id: int) -> None:
        self.get_plant(user_id, plant_id)
        self._repo.delete(plant_id)
        logger.info("Deleted plant %s for user %s (reminders and care logs cascaded)", plant_id, user_id)

    def record_care(self, plant: Plant, care_type: CareType, performed_at: datetime) -> bool:
        """Move the plant's last-care marker forward if this event is newer."""
        if not plant.record_care(care_type, performed_at):
            return False
        plant.updated_at = utc_now()
        self._repo.update(plant)
        return True
