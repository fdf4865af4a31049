"""
Shared test fixtures for the PlantCare backend test suite.

Provides:
- In-memory SQLite database with all tables created
- Repository instances wired to the test database
- A controllable clock and mock collaborators (weather, emitter)
- Service factories for the application services
- Flask app / client fixtures for API tests
- Helper utilities for seeding test data

Usage:
    def test_example(reminder_service, seed):
        plant = seed.create_plant("Basil", watering_every_days=7)
        reminder = reminder_service.create_reminder(1, {"plant_id": plant.plant_id, "care_type": "watering"})
        assert reminder.reminder_id is not None
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest

from app.domain.plant_entity import Plant
from app.domain.reminders import ReminderScheduler
from app.domain.weather import ForecastDay, WeatherSnapshot
from infrastructure.database.repositories import (
    CareLogRepository,
    NotificationRepository,
    PlantRepository,
    ReminderRepository,
)
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler

# ---------------------------------------------------------------------------
# Logging: keep test output quiet
# ---------------------------------------------------------------------------
logging.getLogger("infrastructure").setLevel(logging.WARNING)
logging.getLogger("app").setLevel(logging.WARNING)

# Mid-June: summer, seasonal multiplier 1.3
FIXED_NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def snapshot(
    temperature: float = 22.0,
    humidity: float = 55.0,
    rainfall: tuple[float, ...] = (0.0, 0.0, 0.0),
) -> WeatherSnapshot:
    """Build a WeatherSnapshot with one rainfall value per forecast day."""
    return WeatherSnapshot(
        temperature_c=temperature,
        humidity_pct=humidity,
        forecast=tuple(ForecastDay(days_ahead=i, rainfall_mm=mm) for i, mm in enumerate(rainfall)),
    )


# ========================== Database Fixtures ==============================


@pytest.fixture()
def db_handler():
    """In-memory SQLite database with all tables created.

    Each test gets a fresh database.
    """
    handler = SQLiteDatabaseHandler(":memory:")
    handler.create_tables()
    yield handler
    handler.close()


@pytest.fixture()
def db_connection(db_handler):
    """Raw sqlite3 connection for direct SQL in tests."""
    with db_handler.connection() as conn:
        yield conn


# ========================== Repository Fixtures ============================


@pytest.fixture()
def plant_repo(db_handler):
    """PlantRepository backed by the in-memory DB."""
    return PlantRepository(db_handler)


@pytest.fixture()
def reminder_repo(db_handler):
    """ReminderRepository backed by the in-memory DB."""
    return ReminderRepository(db_handler)


@pytest.fixture()
def care_log_repo(db_handler):
    return CareLogRepository(db_handler)


@pytest.fixture()
def notification_repo(db_handler):
    return NotificationRepository(db_handler)


# ========================== Mock Service Fixtures ==========================


@pytest.fixture()
def clock():
    """Fixed clock at FIXED_NOW; call ``clock.advance(hours=...)`` to move it."""
    return FakeClock()


@pytest.fixture()
def mock_emitter():
    """Mock EmitterService for SocketIO emission."""
    emitter = MagicMock()
    emitter.emit_notification = MagicMock(return_value=True)
    return emitter


@pytest.fixture()
def weather_snapshot():
    """Factory for WeatherSnapshot values (see ``snapshot``)."""
    return snapshot


@pytest.fixture()
def mock_weather():
    """Mock WeatherService returning mild, dry conditions."""
    weather = MagicMock()
    weather.get_weather = MagicMock(return_value=snapshot())
    return weather


# ========================== Service Factory Fixtures =======================


@pytest.fixture()
def scheduler():
    return ReminderScheduler()


@pytest.fixture()
def plant_service(plant_repo):
    from app.services.application.plant_service import PlantService

    return PlantService(plant_repo)


@pytest.fixture()
def notifications_service(notification_repo, mock_emitter):
    """NotificationsService with real repo and mocked emitter."""
    from app.services.application.notifications_service import NotificationsService

    return NotificationsService(notification_repo=notification_repo, emitter_service=mock_emitter)


@pytest.fixture()
def care_log_service(care_log_repo, plant_service):
    from app.services.application.care_log_service import CareLogService

    return CareLogService(care_log_repo, plant_service)


@pytest.fixture()
def reminder_service(
    reminder_repo,
    plant_service,
    scheduler,
    care_log_service,
    notifications_service,
    mock_weather,
    clock,
):
    """ReminderService with real repos, mocked weather and a fixed clock."""
    from app.services.application.reminder_service import ReminderService

    service = ReminderService(
        reminder_repo,
        plant_service,
        scheduler,
        care_log_service=care_log_service,
        notifications_service=notifications_service,
        weather_service=mock_weather,
        clock=clock,
    )
    care_log_service.set_reminder_service(service)
    return service


# ========================== Flask App Fixtures =============================


@pytest.fixture()
def app(tmp_path, monkeypatch):
    """Flask app on a temporary database file with weather disabled."""
    monkeypatch.setenv("PLANTCARE_SECRET_KEY", "test-secret")
    from app import create_app

    flask_app = create_app(
        {
            "database_path": str(tmp_path / "test.db"),
            "weather_enabled": False,
            "log_file": None,
        }
    )
    flask_app.config["TESTING"] = True
    yield flask_app
    flask_app.config["CONTAINER"].shutdown()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def container(app):
    return app.config["CONTAINER"]


# ========================== Seed Data Helpers ==============================


class SeedData:
    """Helper to create commonly needed test data.

    Usage in tests::

        def test_something(seed):
            plant = seed.create_plant("Basil", watering_every_days=7)
            assert seed.count_rows("Plants") == 1
    """

    def __init__(self, db_handler: SQLiteDatabaseHandler, plant_repo: PlantRepository):
        self._db = db_handler
        self._plants = plant_repo

    def create_plant(
        self,
        name: str = "Basil",
        *,
        user_id: int = 1,
        **fields: Any,
    ) -> Plant:
        """Create a plant and return the persisted entity."""
        return self._plants.create(Plant(user_id=user_id, name=name, **fields))

    def count_rows(self, table: str) -> int:
        with self._db.connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]  # nosec B608


@pytest.fixture()
def seed(db_handler, plant_repo):
    """SeedData helper bound to the test DB."""
    return SeedData(db_handler, plant_repo)
