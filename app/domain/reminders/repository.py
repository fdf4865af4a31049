"""
Reminder Repository Protocol
============================

Defines the interface for reminder persistence.
Implementations can use SQLite, PostgreSQL, or other storage.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Protocol

from app.domain.reminders.reminder_entity import Reminder


class ReminderRepository(Protocol):
    """Protocol for reminder persistence operations."""

    @abstractmethod
    def create(self, reminder: Reminder) -> Reminder:
        """
        Persist a new reminder.

        Args:
            reminder: Reminder to create (reminder_id should be None)

        Returns:
            The reminder with its assigned reminder_id
        """
        ...

    @abstractmethod
    def get_by_id(self, reminder_id: int) -> Reminder | None:
        """Get a reminder by ID, or None."""
        ...

    @abstractmethod
    def update(self, reminder: Reminder) -> bool:
        """Write back a mutated reminder. Last write wins."""
        ...

    @abstractmethod
    def delete(self, reminder_id: int) -> bool:
        """Delete a reminder and its child occurrences."""
        ...

    @abstractmethod
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
        """List a user's reminders ordered by due date."""
        ...

    @abstractmethod
    def list_open(self, *, due_before: datetime | None = None) -> list[Reminder]:
        """List non-terminal reminders across all users."""
        ...

    @abstractmethod
    def find_active(self, user_id: int, plant_id: int, care_type: str) -> Reminder | None:
        """Return the open reminder for a plant and care type, if any."""
        ...

