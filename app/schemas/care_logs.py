"""
Care Log Schemas
================

Request schemas for logging care events and listing notifications.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from app.constants import Pagination, ReminderLimits
from app.enums.reminders import CareType
from app.schemas.common import CamelModel, CamelQuery
from app.utils.time import ensure_utc, utc_now


class CreateCareLogRequest(CamelModel):
    """Request schema for recording a care event."""

    plant_id: int = Field(..., gt=0)
    care_type: CareType
    notes: str | None = Field(default=None, max_length=ReminderLimits.NOTES_MAX)
    care_data: dict[str, Any] = Field(default_factory=dict, description="Free-form details (amount, product...)")
    performed_at: datetime | None = Field(default=None, description="Defaults to now")

    @field_validator("performed_at")
    @classmethod
    def not_in_future(cls, v):
        if v is not None and ensure_utc(v) > utc_now():
            raise ValueError("performedAt cannot be in the future")
        return v


class CareLogListQuery(CamelQuery):
    plant_id: int | None = Field(default=None, gt=0)
    care_type: CareType | None = None
    limit: int = Field(default=Pagination.CARE_LOGS_DEFAULT, ge=1, le=Pagination.MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class NotificationListQuery(CamelQuery):
    unread_only: bool = False
    limit: int = Field(default=Pagination.NOTIFICATIONS_DEFAULT, ge=1, le=Pagination.MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)
