"""Repository for plant and care-log persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.care_log_entity import CareLog
from app.domain.plant_entity import Plant

if TYPE_CHECKING:
    from infrastructure.database.ops.care_logs import CareLogOperations
    from infrastructure.database.ops.plants import PlantOperations


class PlantRepository:
    """Repository providing typed access to plants."""

    def __init__(self, backend: "PlantOperations") -> None:
        self._backend = backend

    def create(self, plant: Plant) -> Plant:
        return self._backend.insert_plant(plant)

    def get_by_id(self, plant_id: int) -> Plant | None:
        return self._backend.get_plant(plant_id)

    def list_for_user(self, user_id: int) -> list[Plant]:
        return self._backend.list_plants(user_id)

    def update(self, plant: Plant) -> bool:
        return self._backend.update_plant(plant)

    def delete(self, plant_id: int) -> bool:
        return self._backend.delete_plant(plant_id)


class CareLogRepository:
    """Repository providing typed access to care logs."""

    def __init__(self, backend: "CareLogOperations") -> None:
        self._backend = backend

    def create(self, log: CareLog) -> CareLog:
        return self._backend.insert_care_log(log)

    def get_by_id(self, care_log_id: int) -> CareLog | None:
        return self._backend.get_care_log(care_log_id)

    def list_for_user(
        self,
        user_id: int,
        *,
        plant_id: int | None = None,
        care_type: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[CareLog]:
        return self._backend.list_care_logs(
            user_id, plant_id=plant_id, care_type=care_type, limit=limit, offset=offset
        )

    def delete(self, care_log_id: int) -> bool:
        return self._backend.delete_care_log(care_log_id)
