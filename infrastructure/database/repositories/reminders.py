"""
Reminder Repository
===================

Concrete implementation of the ReminderRepository protocol using SQLite.
Wraps the ReminderOperations mixin from the infrastructure layer.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.domain.reminders.reminder_entity import Reminder

if TYPE_CHECKING:
    from infrastructure.database.ops.reminders import ReminderOperations


class ReminderRepository:
    """
    Concrete implementation of ReminderRepository protocol.

    Wraps the ReminderOperations mixin to provide repository pattern access.
    """

    def __init__(self, backend: "ReminderOperations") -> None:
        self._backend = backend

    # ==================== CRUD Operations ====================

    def create(self, reminder: Reminder) -> Reminder:
        return self._backend.insert_reminder(reminder)

    def get_by_id(self, reminder_id: int) -> Reminder | None:
        return self._backend.get_reminder(reminder_id)

    def update(self, reminder: Reminder) -> bool:
        return self._backend.update_reminder(reminder)

    def delete(self, reminder_id: int) -> bool:
        return self._backend.delete_reminder(reminder_id)

    # ==================== Queries ====================

    def list_for_user(
        self,
        user_id: int,
        *,
        plant_id: int | None = None,
        care_type: str | None = None,
        is_recurring: bool | None = None,
        due_from: datetime | None = None,
        due_to: datetime | None = None,
    ) -> list[Reminder]:
        return self._backend.list_reminders(
            user_id,
            plant_id=plant_id,
            care_type=care_type,
            is_recurring=is_recurring,
            due_from=due_from,
            due_to=due_to,
        )

    def list_open(self, *, due_before: datetime | None = None) -> list[Reminder]:
        return self._backend.list_open_reminders(due_before=due_before)

    def find_active(self, user_id: int, plant_id: int, care_type: str) -> Reminder | None:
        return self._backend.find_active_reminder(user_id, plant_id, care_type)
