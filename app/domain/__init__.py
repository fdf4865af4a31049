"""
Domain Package
==============
Entities, value objects and scheduling rules for plant care.

Entities carry data and serialization; the rules that mutate reminders live in
:class:`~app.domain.reminders.scheduler.ReminderScheduler`.
"""

from .care_log_entity import CareLog
from .plant_entity import Plant
from .reminders import (
    CompletionRecord,
    Reminder,
    ReminderFrequency,
    ReminderScheduler,
    SnoozeRecord,
)
from .weather import ForecastDay, WeatherAssessment, WeatherSnapshot

__all__ = [
    # Plants & care
    "Plant",
    "CareLog",
    # Reminders
    "Reminder",
    "ReminderFrequency",
    "ReminderScheduler",
    "SnoozeRecord",
    "CompletionRecord",
    # Weather
    "ForecastDay",
    "WeatherSnapshot",
    "WeatherAssessment",
]
