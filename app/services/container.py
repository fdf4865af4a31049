from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from app.config import AppConfig
from app.domain.reminders import ReminderScheduler
from app.services.application.care_log_service import CareLogService
from app.services.application.notifications_service import NotificationsService
from app.services.application.plant_service import PlantService
from app.services.application.reminder_service import ReminderService
from app.services.container_builder import ContainerBuilder
from app.services.utilities.weather_service import WeatherService
from app.utils.emitters import EmitterService
from infrastructure.database.repositories import (
    CareLogRepository,
    NotificationRepository,
    PlantRepository,
    ReminderRepository,
)
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Aggregate and manage core backend services."""

    config: AppConfig
    database: SQLiteDatabaseHandler
    plant_repo: PlantRepository
    reminder_repo: ReminderRepository
    care_log_repo: CareLogRepository
    notification_repo: NotificationRepository
    # Shared utilities
    emitter_service: Optional[EmitterService]
    weather_service: Optional[WeatherService]
    # Application services
    scheduler: ReminderScheduler
    plant_service: PlantService
    care_log_service: CareLogService
    notifications_service: NotificationsService
    reminder_service: ReminderService

    @classmethod
    def build(cls, config: AppConfig, *, socketio: Any = None) -> "ServiceContainer":
        """Construct the service container with all dependencies.

        Args:
            config: Application configuration
            socketio: SocketIO instance for real-time notifications (optional)
        """
        logger.info("Building ServiceContainer using ContainerBuilder...")
        components = ContainerBuilder(config, socketio=socketio).build()
        container = cls(**components)
        logger.info("ServiceContainer built successfully.")
        return container

    def shutdown(self) -> None:
        """Release external resources before process exit."""
        if self.weather_service is not None:
            self.weather_service.close()
        self.database.close()
        logger.info("ServiceContainer shutdown complete.")
