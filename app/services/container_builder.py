"""
Container Builder
=================

Service container construction, one ``build_*()`` method per layer:

- build_infrastructure(): database handler and repositories
- build_shared_utilities(): Socket.IO emitter and the weather client
- build_application_components(): plant, care-log, notification and
  reminder services

``ServiceContainer.build()`` delegates to :meth:`ContainerBuilder.build`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.config import AppConfig
from app.domain.reminders import ReminderScheduler
from app.services.application.care_log_service import CareLogService
from app.services.application.notifications_service import NotificationsService
from app.services.application.plant_service import PlantService
from app.services.application.reminder_service import ReminderService
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
class InfrastructureComponents:
    """Infrastructure layer components (database, repos)."""

    database: SQLiteDatabaseHandler
    plant_repo: PlantRepository
    reminder_repo: ReminderRepository
    care_log_repo: CareLogRepository
    notification_repo: NotificationRepository


@dataclass
class SharedUtilities:
    """Shared utility services (emitter, weather client)."""

    emitter_service: EmitterService | None
    weather_service: WeatherService | None


@dataclass
class ApplicationComponents:
    """Application-level services."""

    scheduler: ReminderScheduler
    plant_service: PlantService
    care_log_service: CareLogService
    notifications_service: NotificationsService
    reminder_service: ReminderService


class ContainerBuilder:
    """
    Builds all service components from configuration.

    Example:
        builder = ContainerBuilder(config)
        components = builder.build()
        container = ServiceContainer(**components)
    """

    def __init__(self, config: AppConfig, *, socketio: Any = None):
        """Initialize builder with configuration and the app's SocketIO instance (optional)."""
        self.config = config
        self.socketio = socketio

    def build_infrastructure(self) -> InfrastructureComponents:
        """
        Build infrastructure layer (database, repositories).

        Returns:
            InfrastructureComponents with all infrastructure services
        """
        logger.info("Building infrastructure components...")

        database = SQLiteDatabaseHandler(self.config.database_path)
        database.init_app(None)

        components = InfrastructureComponents(
            database=database,
            plant_repo=PlantRepository(database),
            reminder_repo=ReminderRepository(database),
            care_log_repo=CareLogRepository(database),
            notification_repo=NotificationRepository(database),
        )
        logger.info("✓ Infrastructure components initialized (%s)", database.database_path)
        return components

    def build_shared_utilities(self) -> SharedUtilities:
        emitter_service = EmitterService(self.socketio) if self.socketio is not None else None

        weather_service = None
        if self.config.weather_enabled:
            weather_service = WeatherService(
                api_url=self.config.weather_api_url,
                latitude=self.config.default_latitude,
                longitude=self.config.default_longitude,
                cache_minutes=self.config.weather_cache_minutes,
                timeout=self.config.weather_timeout,
            )
        else:
            logger.info("Weather integration disabled")

        return SharedUtilities(emitter_service=emitter_service, weather_service=weather_service)

    def build_application_components(
        self,
        infra: InfrastructureComponents,
        utils: SharedUtilities,
    ) -> ApplicationComponents:
        """
        Build application services.

        CareLogService and ReminderService depend on each other: the care
        log service is built first and receives the reminder service through
        its setter.
        """
        scheduler = ReminderScheduler(
            self.config.seasonal_multipliers,
            default_max_snoozes=self.config.default_max_snoozes,
        )
        plant_service = PlantService(infra.plant_repo)
        notifications_service = NotificationsService(
            notification_repo=infra.notification_repo,
            emitter_service=utils.emitter_service,
        )
        care_log_service = CareLogService(infra.care_log_repo, plant_service)
        reminder_service = ReminderService(
            infra.reminder_repo,
            plant_service,
            scheduler,
            care_log_service=care_log_service,
            notifications_service=notifications_service,
            weather_service=utils.weather_service,
            due_soon_minutes=self.config.due_soon_minutes,
        )
        care_log_service.set_reminder_service(reminder_service)

        return ApplicationComponents(
            scheduler=scheduler,
            plant_service=plant_service,
            care_log_service=care_log_service,
            notifications_service=notifications_service,
            reminder_service=reminder_service,
        )

    def build(self) -> dict[str, Any]:
        """
        Build the complete service container.

        Returns:
            Dictionary with all components for ServiceContainer construction
        """
        infra = self.build_infrastructure()
        utils = self.build_shared_utilities()
        app = self.build_application_components(infra, utils)

        return {
            "config": self.config,
            "database": infra.database,
            "plant_repo": infra.plant_repo,
            "reminder_repo": infra.reminder_repo,
            "care_log_repo": infra.care_log_repo,
            "notification_repo": infra.notification_repo,
            "emitter_service": utils.emitter_service,
            "weather_service": utils.weather_service,
            "scheduler": app.scheduler,
            "plant_service": app.plant_service,
            "care_log_service": app.care_log_service,
            "notifications_service": app.notifications_service,
            "reminder_service": app.reminder_service,
        }
