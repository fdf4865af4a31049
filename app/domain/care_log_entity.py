"""
Care Log Domain Entity
======================
A care event performed on a plant (watering, fertilizing, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.enums.reminders import CareType
from app.utils.time import coerce_datetime, to_iso, utc_now


@dataclass(slots=True)
class CareLog:
    """Domain entity for one logged care event."""

    user_id: int
    plant_id: int
    care_type: CareType
    care_log_id: int | None = None
    notes: str | None = None
    care_data: dict[str, Any] = field(default_factory=dict)
    reminder_id: int | None = None
    performed_at: datetime | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.care_type, str):
            self.care_type = CareType(self.care_type)
        self.performed_at = coerce_datetime(self.performed_at) or utc_now()
        self.created_at = coerce_datetime(self.created_at) or utc_now()
        self.care_data = dict(self.care_data or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "care_log_id": self.care_log_id,
            "user_id": self.user_id,
            "plant_id": self.plant_id,
            "care_type": self.care_type.value,
            "notes": self.notes,
            "care_data": self.care_data,
            "reminder_id": self.reminder_id,
            "performed_at": to_iso(self.performed_at),
            "created_at": to_iso(self.created_at),
        }
