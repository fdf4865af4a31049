"""
Plant Domain Entity
===================
A user's plant and the care configuration the reminder scheduler reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.constants import DEFAULT_CARE_FREQUENCY_DAYS
from app.enums.reminders import CareType, PlantLocation
from app.utils.time import coerce_datetime, to_iso, utc_now


@dataclass
class Plant:
    """Domain entity for a tracked plant."""

    user_id: int
    name: str
    plant_id: int | None = None
    plant_type: str | None = None
    location: PlantLocation = PlantLocation.INDOOR
    watering_every_days: int | None = None
    fertilizer_every_weeks: int | None = None
    last_watered_at: datetime | None = None
    last_fertilized_at: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if isinstance(self.location, str):
            self.location = PlantLocation(self.location.lower())

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def base_frequency_days(self, care_type: CareType) -> int | None:
        """Interval in days for a care type: plant config first, then defaults."""
        if care_type == CareType.WATERING and self.watering_every_days:
            return int(self.watering_every_days)
        if care_type == CareType.FERTILIZING and self.fertilizer_every_weeks:
            return int(self.fertilizer_every_weeks) * 7
        return DEFAULT_CARE_FREQUENCY_DAYS.get(care_type.value)

    def last_care_date(self, care_type: CareType) -> datetime | None:
        if care_type == CareType.WATERING:
            return self.last_watered_at
        if care_type == CareType.FERTILIZING:
            return self.last_fertilized_at
        return None

    def record_care(self, care_type: CareType, performed_at: datetime) -> bool:
        """Update the last-care marker for tracked care types. Returns True if changed."""
        if care_type == CareType.WATERING:
            if self.last_watered_at is None or performed_at > self.last_watered_at:
                self.last_watered_at = performed_at
                return True
        elif care_type == CareType.FERTILIZING:
            if self.last_fertilized_at is None or performed_at > self.last_fertilized_at:
                self.last_fertilized_at = performed_at
                return True
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "plant_id": self.plant_id,
            "user_id": self.user_id,
            "name": self.name,
            "plant_type": self.plant_type,
            "location": self.location.value,
            "watering_every_days": self.watering_every_days,
            "fertilizer_every_weeks": self.fertilizer_every_weeks,
            "last_watered_at": to_iso(self.last_watered_at),
            "last_fertilized_at": to_iso(self.last_fertilized_at),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }

    @staticmethod
    def from_row(row: dict[str, Any]) -> "Plant":
        return Plant(
            plant_id=row.get("plant_id"),
            user_id=int(row.get("user_id", 1)),
            name=row.get("name", ""),
            plant_type=row.get("plant_type"),
            location=row.get("location") or PlantLocation.INDOOR,
            watering_every_days=row.get("watering_every_days"),
            fertilizer_every_weeks=row.get("fertilizer_every_weeks"),
            last_watered_at=coerce_datetime(row.get("last_watered_at")),
            last_fertilized_at=coerce_datetime(row.get("last_fertilized_at")),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            created_at=coerce_datetime(row.get("created_at")) or utc_now(),
            updated_at=coerce_datetime(row.get("updated_at")) or utc_now(),
        )
