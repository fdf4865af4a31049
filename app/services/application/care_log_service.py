"""
Care Log Service
================

Records care events performed on plants.

Logging an event:
- moves the plant's last-watered / last-fertilized marker forward
- creates the first reminder for that care type when the plant has none open
  and a base frequency is known (plant config or defaults)

The reminder service is wired in after construction (it also depends on this
service to log completions).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from app.constants import Pagination
from app.domain.care_log_entity import CareLog
from app.domain.exceptions import NotFoundError
from app.enums.reminders import CareType
from app.utils.time import utc_now

if TYPE_CHECKING:
    from app.services.application.plant_service import PlantService
    from app.services.application.reminder_service import ReminderService
    from infrastructure.database.repositories.plants import CareLogRepository

logger = logging.getLogger(__name__)


class CareLogService:
    """Care event log per plant."""

    def __init__(
        self,
        care_log_repo: "CareLogRepository",
        plant_service: "PlantService",
        reminder_service: Optional["ReminderService"] = None,
    ) -> None:
        self._repo = care_log_repo
        self._plants = plant_service
        self._reminders = reminder_service

    def set_reminder_service(self, reminder_service: "ReminderService") -> None:
        self._reminders = reminder_service

    def log_care(
        self,
        user_id: int,
        plant_id: int,
        care_type: CareType | str,
        *,
        notes: str | None = None,
        care_data: dict[str, Any] | None = None,
        performed_at: datetime | None = None,
        reminder_id: int | None = None,
        schedule_reminder: bool = True,
    ) -> CareLog:
        """
        Record a care event.

        Args:
            schedule_reminder: Create the first reminder when none is open.
                Reminder completion passes False because it generates the
                next occurrence itself.

        Raises:
            NotFoundError: Plant unknown or owned by another user
        """
        care_type = CareType(care_type)
        plant = self._plants.get_plant(user_id, plant_id)
        log = CareLog(
            user_id=user_id,
            plant_id=plant_id,
            care_type=care_type,
            notes=notes,
            care_data=care_data or {},
            reminder_id=reminder_id,
            performed_at=performed_at or utc_now(),
        )
        created = self._repo.create(log)
        self._plants.record_care(plant, care_type, created.performed_at)
        logger.info("Logged %s for plant %s (care_log=%s)", care_type.value, plant_id, created.care_log_id)

        if schedule_reminder and self._reminders is not None:
            self._reminders.ensure_reminder_for_care(plant, care_type, created.performed_at)
        return created

    def list_care_logs(
        self,
        user_id: int,
        *,
        plant_id: int | None = None,
        care_type: str | None = None,
        limit: int = Pagination.CARE_LOGS_DEFAULT,
        offset: int = 0,
    ) -> list[CareLog]:
        if plant_id is not None:
            self._plants.get_plant(user_id, plant_id)
        return self._repo.list_for_user(user_id, plant_id=plant_id, care_type=care_type, limit=limit, offset=offset)

    def delete_care_log(self, user_id: int, care_log_id: int) -> None:
        log = self._repo.get_by_id(care_log_id)
        if log is None or log.user_id != user_id:
            raise NotFoundError(f"Care log {care_log_id} not found")
        self._repo.delete(care_log_id)
