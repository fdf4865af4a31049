"""
Reminders Domain
================
Reminder aggregate, scheduling rules and the persistence contract.
"""

from app.domain.reminders.reminder_entity import (
    CompletionRecord,
    EnvironmentalFactors,
    NotificationSettings,
    RecurrenceSettings,
    Reminder,
    ReminderFrequency,
    SnoozeRecord,
)
from app.domain.reminders.repository import ReminderRepository
from app.domain.reminders.scheduler import ReminderScheduler

__all__ = [
    "CompletionRecord",
    "EnvironmentalFactors",
    "NotificationSettings",
    "RecurrenceSettings",
    "Reminder",
    "ReminderFrequency",
    "ReminderRepository",
    "ReminderScheduler",
    "SnoozeRecord",
]
