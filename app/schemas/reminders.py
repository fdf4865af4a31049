"""
Reminder Schemas
================

Request schemas for the reminder endpoints. Bodies are camelCase; the
services receive snake_case dicts from ``model_dump``.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from app.constants import Pagination, ReminderLimits, SEASONAL_MULTIPLIER_MAX, SEASONAL_MULTIPLIER_MIN
from app.enums.reminders import (
    CareType,
    NotificationMethod,
    RecurrencePattern,
    ReminderPriority,
    ReminderStatus,
    Season,
)
from app.schemas.common import CamelModel, CamelQuery, PaginationParams

_SEASONS = {season.value for season in Season}


class RecurrenceInput(CamelModel):
    enabled: bool = True
    pattern: RecurrencePattern = RecurrencePattern.FIXED
    end_date: datetime | None = None
    max_occurrences: int | None = Field(default=None, ge=1, le=ReminderLimits.MAX_OCCURRENCES_CAP)


class NotificationInput(CamelModel):
    enabled: bool = True
    methods: list[NotificationMethod] = Field(default_factory=lambda: [NotificationMethod.IN_APP], min_length=1)
    advance_notice_days: int = Field(default=0, ge=0, le=30)


class _ReminderFields(CamelModel):
    """Fields shared by create and update."""

    title: str | None = Field(default=None, min_length=1, max_length=ReminderLimits.TITLE_MAX)
    description: str | None = Field(default=None, max_length=ReminderLimits.DESCRIPTION_MAX)
    notes: str | None = Field(default=None, max_length=ReminderLimits.NOTES_MAX)
    due_date: datetime | None = Field(default=None, description="Overrides the computed due date")
    frequency_days: int | None = Field(
        default=None, ge=ReminderLimits.FREQUENCY_MIN_DAYS, le=ReminderLimits.FREQUENCY_MAX_DAYS
    )
    is_flexible: bool | None = None
    flexibility_days: int | None = Field(default=None, ge=0, le=ReminderLimits.FLEXIBILITY_MAX_DAYS)
    priority: ReminderPriority | None = Field(
        default=None,
        description="low, medium, high, urgent (or critical); validated, then re-derived from how overdue it is",
    )
    max_snoozes: int | None = Field(default=None, ge=0, le=ReminderLimits.MAX_SNOOZES_CAP)
    is_recurring: bool | None = None
    recurrence: RecurrenceInput | None = None
    notifications: NotificationInput | None = None
    seasonal_adjustments: dict[str, float] | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        """Accept 'critical' as an alias of 'urgent'."""
        if v is None:
            return v
        try:
            return ReminderPriority.parse(v)
        except ValueError:
            raise ValueError("priority must be one of low, medium, high, urgent")

    @field_validator("seasonal_adjustments")
    @classmethod
    def check_multipliers(cls, v):
        if v is None:
            return v
        unknown = set(v) - _SEASONS
        if unknown:
            raise ValueError(f"unknown seasons: {', '.join(sorted(unknown))}")
        for season, multiplier in v.items():
            if not SEASONAL_MULTIPLIER_MIN <= multiplier <= SEASONAL_MULTIPLIER_MAX:
                raise ValueError(
                    f"{season} multiplier must be between {SEASONAL_MULTIPLIER_MIN} and {SEASONAL_MULTIPLIER_MAX}"
                )
        return v


class CreateReminderRequest(_ReminderFields):
    """Request schema for creating a reminder."""

    plant_id: int | None = Field(default=None, gt=0)
    care_type: CareType
    last_care_date: datetime | None = None


class UpdateReminderRequest(_ReminderFields):
    """Request schema for editing a reminder; only sent fields change."""

    @field_validator("due_date")
    @classmethod
    def due_date_not_null(cls, v):
        if v is None:
            raise ValueError("dueDate cannot be cleared")
        return v


class ReminderListQuery(PaginationParams):
    """Query parameters for GET /reminders."""

    status: ReminderStatus | None = None
    plant_id: int | None = Field(default=None, gt=0)
    care_type: CareType | None = None
    priority: ReminderPriority | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    is_recurring: bool | None = None
    sort_by: Literal["dueDate", "createdAt", "priority"] = "dueDate"
    sort_order: Literal["asc", "desc"] = "asc"

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        return ReminderPriority.parse(v) if v else None

    @property
    def sort_field(self) -> str:
        return {"dueDate": "due_date", "createdAt": "created_at"}.get(self.sort_by, self.sort_by)


class UpcomingQuery(CamelQuery):
    days: int = Field(
        default=ReminderLimits.UPCOMING_DAYS_DEFAULT, ge=1, le=ReminderLimits.UPCOMING_DAYS_MAX
    )


class CompleteReminderRequest(CamelModel):
    notes: str | None = Field(default=None, max_length=ReminderLimits.NOTES_MAX)
    create_care_log: bool = True


class SnoozeReminderRequest(CamelModel):
    hours: int = Field(
        default=ReminderLimits.DEFAULT_SNOOZE_HOURS, ge=1, le=ReminderLimits.SNOOZE_HOURS_MAX
    )
    reason: str | None = Field(default=None, max_length=ReminderLimits.SNOOZE_REASON_MAX)


class SmartScheduleRequest(CamelModel):
    """Request schema for generating reminders from a plant's care config."""

    plant_id: int = Field(..., gt=0)
    care_types: list[CareType] = Field(default_factory=lambda: [CareType.WATERING], min_length=1)
    consider_weather: bool = True
    consider_season: bool = True


class WeatherAdjustRequest(CamelModel):
    plant_id: int | None = Field(default=None, gt=0)


class BulkReminderRequest(CamelModel):
    """Request schema for bulk reminder operations."""

    reminder_ids: list[int] = Field(..., min_length=1, max_length=Pagination.BULK_MAX_IDS)
    operation: Literal["delete", "complete", "snooze", "dismiss"]
    hours: int = Field(
        default=ReminderLimits.DEFAULT_SNOOZE_HOURS, ge=1, le=ReminderLimits.SNOOZE_HOURS_MAX
    )
    reason: str | None = Field(default=None, max_length=ReminderLimits.SNOOZE_REASON_MAX)
