"""
Schemas Module
==============

This module provides Pydantic models for request validation.
Schemas keep the HTTP contract (camelCase) decoupled from the entities.
"""

from app.schemas.care_logs import CareLogListQuery, CreateCareLogRequest, NotificationListQuery
from app.schemas.common import CamelModel, CamelQuery, PaginationMeta, PaginationParams, validation_details
from app.schemas.plants import CreatePlantRequest, UpdatePlantRequest
from app.schemas.reminders import (
    BulkReminderRequest,
    CompleteReminderRequest,
    CreateReminderRequest,
    NotificationInput,
    RecurrenceInput,
    ReminderListQuery,
    SmartScheduleRequest,
    SnoozeReminderRequest,
    UpcomingQuery,
    UpdateReminderRequest,
    WeatherAdjustRequest,
)

__all__ = [
    # Common
    "CamelModel",
    "CamelQuery",
    "PaginationMeta",
    "PaginationParams",
    "validation_details",
    # Plants
    "CreatePlantRequest",
    "UpdatePlantRequest",
    # Care logs & notifications
    "CareLogListQuery",
    "CreateCareLogRequest",
    "NotificationListQuery",
    # Reminders
    "BulkReminderRequest",
    "CompleteReminderRequest",
    "CreateReminderRequest",
    "NotificationInput",
    "RecurrenceInput",
    "ReminderListQuery",
    "SmartScheduleRequest",
    "SnoozeReminderRequest",
    "UpcomingQuery",
    "UpdateReminderRequest",
    "WeatherAdjustRequest",
]
