"""
Plant Schemas
=============

Request schemas for plant registry endpoints.
"""

from datetime import datetime

from pydantic import Field

from app.enums.reminders import PlantLocation
from app.schemas.common import CamelModel


class _PlantFields(CamelModel):
    plant_type: str | None = Field(default=None, max_length=100, description="Species or common type")
    location: PlantLocation | None = None
    watering_every_days: int | None = Field(default=None, ge=1, le=365, description="Watering interval in days")
    fertilizer_every_weeks: int | None = Field(default=None, ge=1, le=52, description="Fertilizing interval in weeks")
    last_watered_at: datetime | None = None
    last_fertilized_at: datetime | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class CreatePlantRequest(_PlantFields):
    """Request schema for registering a plant."""

    name: str = Field(..., min_length=1, max_length=100, description="Plant name")


class UpdatePlantRequest(_PlantFields):
    """Request schema for updating a plant; only sent fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
