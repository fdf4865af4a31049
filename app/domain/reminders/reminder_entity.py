"""
Reminder Domain Entity
======================

Care reminder aggregate. Holds the scheduling state mutated by
:class:`~app.domain.reminders.scheduler.ReminderScheduler`:

- due date and the date it was originally scheduled for
- snooze counter, cap and history
- completion history and the rolling compliance rate
- seasonal multipliers and weather adjustment markers
- recurrence settings linking sibling occurrences via ``parent_id``

The entity carries data only. State transitions live in the scheduler so the
same rules apply everywhere (HTTP, CLI sweep, smart scheduling).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.constants import (
    DEFAULT_COMPLIANCE_RATE,
    DEFAULT_CONFIDENCE_SCORE,
    DEFAULT_SEASONAL_MULTIPLIERS,
    ReminderLimits,
)
from app.enums.reminders import (
    CareType,
    NotificationMethod,
    RecurrencePattern,
    ReminderPriority,
    ReminderStatus,
    Season,
    WeatherImpact,
)
from app.utils.time import coerce_datetime, to_iso, utc_now


@dataclass
class ReminderFrequency:
    """How often the care action repeats."""

    days: int = 7
    is_flexible: bool = True
    flexibility_days: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": self.days,
            "is_flexible": self.is_flexible,
            "flexibility_days": self.flexibility_days,
        }

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> "ReminderFrequency":
        data = data or {}
        return ReminderFrequency(
            days=int(data.get("days", 7)),
            is_flexible=bool(data.get("is_flexible", True)),
            flexibility_days=int(data.get("flexibility_days", 1)),
        )


@dataclass
class SnoozeRecord:
    """One snooze action: where the due date moved from and to."""

    snoozed_at: datetime
    from_date: datetime
    to_date: datetime
    hours: int
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "snoozed_at": to_iso(self.snoozed_at),
            "from_date": to_iso(self.from_date),
            "to_date": to_iso(self.to_date),
            "hours": self.hours,
            "reason": self.reason,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SnoozeRecord":
        return SnoozeRecord(
            snoozed_at=coerce_datetime(data.get("snoozed_at")),
            from_date=coerce_datetime(data.get("from_date")),
            to_date=coerce_datetime(data.get("to_date")),
            hours=int(data.get("hours", 0)),
            reason=data.get("reason"),
        )


@dataclass
class CompletionRecord:
    """One completion of a reminder occurrence."""

    completed_at: datetime
    completed_by: int | None
    was_on_time: bool
    days_overdue: int = 0
    next_reminder_generated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "completed_at": to_iso(self.completed_at),
            "completed_by": self.completed_by,
            "was_on_time": self.was_on_time,
            "days_overdue": self.days_overdue,
            "next_reminder_generated": self.next_reminder_generated,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "CompletionRecord":
        return CompletionRecord(
            completed_at=coerce_datetime(data.get("completed_at")),
            completed_by=data.get("completed_by"),
            was_on_time=bool(data.get("was_on_time", True)),
            days_overdue=int(data.get("days_overdue", 0)),
            next_reminder_generated=bool(data.get("next_reminder_generated", False)),
        )


@dataclass
class EnvironmentalFactors:
    """Season and weather context last applied to the due date."""

    current_season: Season | None = None
    weather_impact: WeatherImpact = WeatherImpact.NONE
    weather_adjusted: bool = False
    adjustment_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_season": self.current_season.value if self.current_season else None,
            "weather_impact": self.weather_impact.value,
            "weather_adjusted": self.weather_adjusted,
            "adjustment_reason": self.adjustment_reason,
        }

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> "EnvironmentalFactors":
        data = data or {}
        season = data.get("current_season")
        return EnvironmentalFactors(
            current_season=Season(season) if season else None,
            weather_impact=WeatherImpact(data.get("weather_impact", "none")),
            weather_adjusted=bool(data.get("weather_adjusted", False)),
            adjustment_reason=data.get("adjustment_reason"),
        )


@dataclass
class RecurrenceSettings:
    """Recurrence rules for spawning the next occurrence."""

    enabled: bool = True
    pattern: RecurrencePattern = RecurrencePattern.FIXED
    end_date: datetime | None = None
    max_occurrences: int | None = None
    current_occurrence: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "pattern": self.pattern.value,
            "end_date": to_iso(self.end_date),
            "max_occurrences": self.max_occurrences,
            "current_occurrence": self.current_occurrence,
        }

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> "RecurrenceSettings":
        data = data or {}
        return RecurrenceSettings(
            enabled=bool(data.get("enabled", True)),
            pattern=RecurrencePattern(data.get("pattern", "fixed")),
            end_date=coerce_datetime(data.get("end_date")),
            max_occurrences=data.get("max_occurrences"),
            current_occurrence=int(data.get("current_occurrence", 1)),
        )


@dataclass
class NotificationSettings:
    enabled: bool = True
    methods: list[NotificationMethod] = field(default_factory=lambda: [NotificationMethod.IN_APP])
    advance_notice_days: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "methods": [m.value for m in self.methods],
            "advance_notice_days": self.advance_notice_days,
        }

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> "NotificationSettings":
        data = data or {}
        methods = data.get("methods") or ["in-app"]
        return NotificationSettings(
            enabled=bool(data.get("enabled", True)),
            methods=[NotificationMethod(m) for m in methods],
            advance_notice_days=int(data.get("advance_notice_days", 0)),
        )


@dataclass
class Reminder:
    """
    A scheduled care action for one plant.

    Attributes:
        reminder_id: Database id (None until persisted)
        user_id: Owner
        plant_id: Plant the reminder belongs to (optional)
        care_type: Kind of care
        due_date: When the care is due (moved by snooze and weather)
        original_due_date: Due date at creation time
        snooze_count: Number of snoozes applied; never exceeds max_snoozes
        compliance_rate: on-time completions / total completions
        parent_id: Id of the occurrence this one was generated from
    """

    user_id: int
    care_type: CareType
    title: str
    due_date: datetime
    reminder_id: int | None = None
    plant_id: int | None = None
    plant_name: str | None = None
    description: str | None = None
    notes: str | None = None
    original_due_date: datetime | None = None
    frequency: ReminderFrequency = field(default_factory=ReminderFrequency)
    status: ReminderStatus = ReminderStatus.PENDING
    priority: ReminderPriority = ReminderPriority.MEDIUM
    snoozed_until: datetime | None = None
    snooze_count: int = 0
    max_snoozes: int = ReminderLimits.DEFAULT_MAX_SNOOZES
    snooze_history: list[SnoozeRecord] = field(default_factory=list)
    last_care_date: datetime | None = None
    seasonal_adjustments: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_SEASONAL_MULTIPLIERS)
    )
    environmental_factors: EnvironmentalFactors = field(default_factory=EnvironmentalFactors)
    completion_history: list[CompletionRecord] = field(default_factory=list)
    compliance_rate: float = DEFAULT_COMPLIANCE_RATE
    confidence_score: float = DEFAULT_CONFIDENCE_SCORE
    is_recurring: bool = True
    recurrence: RecurrenceSettings = field(default_factory=RecurrenceSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    parent_id: int | None = None
    is_active: bool = True
    notified_at: datetime | None = None
    completed_at: datetime | None = None
    dismissed_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.original_due_date is None:
            self.original_due_date = self.due_date

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def is_overdue(self, now: datetime) -> bool:
        return now > self.due_date

    def to_dict(self) -> dict[str, Any]:
        """Convert reminder to dictionary for storage and API responses."""
        return {
            "reminder_id": self.reminder_id,
            "user_id": self.user_id,
            "plant_id": self.plant_id,
            "plant_name": self.plant_name,
            "care_type": self.care_type.value,
            "title": self.title,
            "description": self.description,
            "notes": self.notes,
            "due_date": to_iso(self.due_date),
            "scheduled_date": to_iso(self.due_date),
            "original_due_date": to_iso(self.original_due_date),
            "frequency": self.frequency.to_dict(),
            "status": self.status.value,
            "priority": self.priority.value,
            "snoozed_until": to_iso(self.snoozed_until),
            "snooze_count": self.snooze_count,
            "max_snoozes": self.max_snoozes,
            "snooze_history": [s.to_dict() for s in self.snooze_history],
            "last_care_date": to_iso(self.last_care_date),
            "seasonal_adjustments": dict(self.seasonal_adjustments),
            "environmental_factors": self.environmental_factors.to_dict(),
            "completion_history": [c.to_dict() for c in self.completion_history],
            "compliance_rate": self.compliance_rate,
            "confidence_score": self.confidence_score,
            "is_recurring": self.is_recurring,
            "recurrence": self.recurrence.to_dict(),
            "notifications": self.notifications.to_dict(),
            "parent_id": self.parent_id,
            "is_active": self.is_active,
            "notified_at": to_iso(self.notified_at),
            "completed_at": to_iso(self.completed_at),
            "dismissed_at": to_iso(self.dismissed_at),
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Reminder":
        """Create Reminder from a stored dictionary."""
        seasonal = dict(DEFAULT_SEASONAL_MULTIPLIERS)
        seasonal.update(data.get("seasonal_adjustments") or {})
        return Reminder(
            reminder_id=data.get("reminder_id"),
            user_id=int(data.get("user_id", 1)),
            plant_id=data.get("plant_id"),
            plant_name=data.get("plant_name"),
            care_type=CareType(data["care_type"]),
            title=data.get("title", ""),
            description=data.get("description"),
            notes=data.get("notes"),
            due_date=coerce_datetime(data.get("due_date")),
            original_due_date=coerce_datetime(data.get("original_due_date")),
            frequency=ReminderFrequency.from_dict(data.get("frequency")),
            status=ReminderStatus(data.get("status", "pending")),
            priority=ReminderPriority.parse(data.get("priority", "medium")),
            snoozed_until=coerce_datetime(data.get("snoozed_until")),
            snooze_count=int(data.get("snooze_count", 0)),
            max_snoozes=int(data.get("max_snoozes", ReminderLimits.DEFAULT_MAX_SNOOZES)),
            snooze_history=[SnoozeRecord.from_dict(s) for s in data.get("snooze_history") or []],
            last_care_date=coerce_datetime(data.get("last_care_date")),
            seasonal_adjustments=seasonal,
            environmental_factors=EnvironmentalFactors.from_dict(data.get("environmental_factors")),
            completion_history=[CompletionRecord.from_dict(c) for c in data.get("completion_history") or []],
            compliance_rate=float(data.get("compliance_rate", DEFAULT_COMPLIANCE_RATE)),
            confidence_score=float(data.get("confidence_score", DEFAULT_CONFIDENCE_SCORE)),
            is_recurring=bool(data.get("is_recurring", True)),
            recurrence=RecurrenceSettings.from_dict(data.get("recurrence")),
            notifications=NotificationSettings.from_dict(data.get("notifications")),
            parent_id=data.get("parent_id"),
            is_active=bool(data.get("is_active", True)),
            notified_at=coerce_datetime(data.get("notified_at")),
            completed_at=coerce_datetime(data.get("completed_at")),
            dismissed_at=coerce_datetime(data.get("dismissed_at")),
            created_at=coerce_datetime(data.get("created_at")) or utc_now(),
            updated_at=coerce_datetime(data.get("updated_at")) or utc_now(),
        )
