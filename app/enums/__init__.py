"""
Enums Module
============

This module provides enumeration types for the PlantCare application.
Enums ensure type safety and consistency across the codebase.
"""

from app.enums.reminders import (
    CareType,
    NotificationMethod,
    NotificationType,
    PlantLocation,
    RecurrencePattern,
    ReminderPriority,
    ReminderStatus,
    Season,
    WeatherImpact,
)

__all__ = [
    "CareType",
    "NotificationMethod",
    "NotificationType",
    "PlantLocation",
    "RecurrencePattern",
    "ReminderPriority",
    "ReminderStatus",
    "Season",
    "WeatherImpact",
]
