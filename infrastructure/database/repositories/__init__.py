"""Repository facades exposing typed accessors over low-level mixins."""

from infrastructure.database.repositories.notifications import NotificationRepository
from infrastructure.database.repositories.plants import CareLogRepository, PlantRepository
from infrastructure.database.repositories.reminders import ReminderRepository

__all__ = [
    "CareLogRepository",
    "NotificationRepository",
    "PlantRepository",
    "ReminderRepository",
]
