"""
Reminder Enumerations
=====================

Enums for plant-care reminders, care logs and the scheduling rules that
drive them.
"""

from enum import Enum


class CareType(str, Enum):
    """
    Kinds of plant care a reminder or care log can refer to.
    Used by: reminder scheduler, care logs, smart scheduling
    """
    WATERING = "watering"
    FERTILIZING = "fertilizing"
    PRUNING = "pruning"
    REPOTTING = "repotting"
    HEALTH_CHECK = "health-check"
    PEST_TREATMENT = "pest-treatment"
    SOIL_CHANGE = "soil-change"
    LOCATION_CHANGE = "location-change"

    def __str__(self) -> str:
        return self.value


class ReminderStatus(str, Enum):
    """
    Reminder lifecycle states.
    COMPLETED and DISMISSED are terminal.
    """
    PENDING = "pending"
    OVERDUE = "overdue"
    COMPLETED = "completed"
    SNOOZED = "snoozed"
    DISMISSED = "dismissed"

    @property
    def is_terminal(self) -> bool:
        return self in (ReminderStatus.COMPLETED, ReminderStatus.DISMISSED)

    def __str__(self) -> str:
        return self.value


class ReminderPriority(str, Enum):
    """
    Reminder priority, derived from how long a reminder has been overdue.
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def parse(cls, value: "str | ReminderPriority") -> "ReminderPriority":
        """Parse a priority, accepting ``critical`` as an alias of ``urgent``."""
        if isinstance(value, cls):
            return value
        raw = str(value).strip().lower()
        if raw == "critical":
            return cls.URGENT
        return cls(raw)

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3, "urgent": 4}[self.value]

    def __str__(self) -> str:
        return self.value


class Season(str, Enum):
    """Northern-hemisphere seasons keyed off the calendar month."""
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"

    def __str__(self) -> str:
        return self.value


class WeatherImpact(str, Enum):
    """
    Weather-driven adjustment directive for watering reminders.
    INCREASE pulls watering earlier (hot, dry); DECREASE pushes it later (rain).
    """
    INCREASE = "increase"
    DECREASE = "decrease"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class RecurrencePattern(str, Enum):
    """How the next occurrence of a recurring reminder is derived."""
    FIXED = "fixed"
    ADAPTIVE = "adaptive"
    SEASONAL = "seasonal"

    def __str__(self) -> str:
        return self.value


class NotificationMethod(str, Enum):
    """Channels a reminder may be delivered through."""
    BROWSER = "browser"
    EMAIL = "email"
    PUSH = "push"
    IN_APP = "in-app"

    def __str__(self) -> str:
        return self.value


class NotificationType(str, Enum):
    """In-app notification categories emitted by the reminder workflow."""
    REMINDER_CREATED = "reminder_created"
    REMINDER_COMPLETED = "reminder_completed"
    REMINDER_DUE = "reminder_due"
    SCHEDULE_ADJUSTED = "schedule_adjusted"

    def __str__(self) -> str:
        return self.value


class PlantLocation(str, Enum):
    """Where a plant is kept."""
    INDOOR = "indoor"
    OUTDOOR = "outdoor"

    def __str__(self) -> str:
        return self.value
