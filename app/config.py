"""
Configuration for PlantCare
===========================
Application runtime settings loaded from ``PLANTCARE_*`` environment
variables. Sets up the logging configuration as well.
"""

import json
import os
from contextlib import suppress
from dataclasses import dataclass, field, fields, replace
from typing import Any

from app.constants import (
    DEFAULT_SEASONAL_MULTIPLIERS,
    SEASONAL_MULTIPLIER_MAX,
    SEASONAL_MULTIPLIER_MIN,
    ReminderLimits,
    Timeouts,
)
from app.domain.exceptions import ConfigurationError


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float | None) -> float | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number.") from None


def _env_multipliers(name: str) -> dict[str, float]:
    """Seasonal multipliers from a JSON object, merged over the defaults."""
    multipliers = dict(DEFAULT_SEASONAL_MULTIPLIERS)
    value = os.getenv(name)
    if not value:
        return multipliers
    try:
        overrides = json.loads(value)
    except json.JSONDecodeError:
        raise ValueError(f"Environment variable {name} must be a JSON object.") from None
    if not isinstance(overrides, dict):
        raise ValueError(f"Environment variable {name} must be a JSON object.")
    multipliers.update({str(k).lower(): float(v) for k, v in overrides.items()})
    return multipliers


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("PLANTCARE_ENV", "development"))
    secret_key: str = field(default_factory=lambda: os.getenv("PLANTCARE_SECRET_KEY", "PlantCareDevSecretKey"))
    database_path: str = field(
        default_factory=lambda: os.getenv("PLANTCARE_DATABASE_PATH", "database/plantcare.db")
    )
    socketio_cors_origins: str = field(default_factory=lambda: os.getenv("PLANTCARE_SOCKETIO_CORS", "*"))

    DEBUG: bool = field(default_factory=lambda: _env_bool("PLANTCARE_DEBUG", False))
    TESTING: bool = field(default_factory=lambda: _env_bool("PLANTCARE_TESTING", False))
    log_level: str = field(default_factory=lambda: os.getenv("PLANTCARE_LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("PLANTCARE_LOG_FILE", "logs/plantcare.log"))

    # Upload / request size limits
    max_upload_mb: int = field(default_factory=lambda: _env_int("PLANTCARE_MAX_UPLOAD_MB", 1))

    # Reminder scheduling
    default_max_snoozes: int = field(
        default_factory=lambda: _env_int("PLANTCARE_DEFAULT_MAX_SNOOZES", ReminderLimits.DEFAULT_MAX_SNOOZES)
    )
    due_soon_minutes: int = field(default_factory=lambda: _env_int("PLANTCARE_DUE_SOON_MINUTES", 60))
    seasonal_multipliers: dict[str, float] = field(
        default_factory=lambda: _env_multipliers("PLANTCARE_SEASONAL_MULTIPLIERS")
    )

    # Weather integration (Open-Meteo)
    weather_enabled: bool = field(default_factory=lambda: _env_bool("PLANTCARE_WEATHER_ENABLED", True))
    weather_api_url: str = field(
        default_factory=lambda: os.getenv("PLANTCARE_WEATHER_API_URL", "https://api.open-meteo.com/v1/forecast")
    )
    weather_timeout: int = field(
        default_factory=lambda: _env_int("PLANTCARE_WEATHER_TIMEOUT", Timeouts.HTTP_REQUEST_TIMEOUT)
    )
    weather_cache_minutes: int = field(default_factory=lambda: _env_int("PLANTCARE_WEATHER_CACHE_MINUTES", 30))
    default_latitude: float | None = field(default_factory=lambda: _env_float("PLANTCARE_LATITUDE", None))
    default_longitude: float | None = field(default_factory=lambda: _env_float("PLANTCARE_LONGITUDE", None))

    # Default insecure secret key - used only for detection
    _DEFAULT_SECRET_KEY: str = field(default="PlantCareDevSecretKey", init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        # SECURITY: Fail fast if using default secret key in production
        if self.environment == "production" and self.secret_key == self._DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECURITY ERROR: Cannot use default secret key in production!\n"
                "Set PLANTCARE_SECRET_KEY environment variable to a secure random value.\n"
                'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"'
            )

        if not 0 <= self.default_max_snoozes <= ReminderLimits.MAX_SNOOZES_CAP:
            raise ConfigurationError(
                f"PLANTCARE_DEFAULT_MAX_SNOOZES must be between 0 and {ReminderLimits.MAX_SNOOZES_CAP}"
            )
        for season, multiplier in self.seasonal_multipliers.items():
            if season not in DEFAULT_SEASONAL_MULTIPLIERS:
                raise ConfigurationError(f"Unknown season in seasonal multipliers: {season}")
            if not SEASONAL_MULTIPLIER_MIN <= multiplier <= SEASONAL_MULTIPLIER_MAX:
                raise ConfigurationError(
                    f"Seasonal multiplier for {season} must be between "
                    f"{SEASONAL_MULTIPLIER_MIN} and {SEASONAL_MULTIPLIER_MAX}"
                )

    def with_overrides(self, overrides: dict[str, Any] | None) -> "AppConfig":
        """
        Copy with ``overrides`` applied (keys match field names case-insensitively).

        The copy is validated again.

        Raises:
            ConfigurationError: Unknown key or an overridden value out of range
        """
        if not overrides:
            return self
        names = {f.name.lower(): f.name for f in fields(self) if f.init}
        changes = {}
        for key, value in overrides.items():
            name = names.get(key.lower())
            if name is None:
                raise ConfigurationError(f"Unknown configuration key: {key}")
            changes[name] = value
        return replace(self, **changes)

    def as_flask_config(self) -> dict[str, Any]:
        """Render configuration values for Flask application."""
        secret = self.secret_key or os.getenv("FLASK_SECRET_KEY", "")
        if not secret:
            raise RuntimeError(
                "Missing PLANTCARE_SECRET_KEY or FLASK_SECRET_KEY environment variable. "
                "Production systems must set an explicit secret key."
            )

        return {
            "ENV": self.environment,
            "SECRET_KEY": secret,
            "DATABASE_PATH": self.database_path,
            "SOCKETIO_CORS_ALLOWED_ORIGINS": self.socketio_cors_origins,
            "DEBUG": self.DEBUG,
            "TESTING": self.TESTING,
            "MAX_CONTENT_LENGTH": self.max_upload_mb * 1024 * 1024,
        }


def setup_logging(debug: bool = False, log_file: str | None = "logs/plantcare.log", level: str | None = None) -> None:
    """Setup logging configuration."""
    import logging
    import sys
    from logging.handlers import RotatingFileHandler

    log_level = logging.DEBUG if debug else logging.getLevelName((level or "INFO").upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    # Root logger
    root = logging.getLogger()
    root.setLevel(log_level)

    # Keep existing handlers but avoid adding duplicates when create_app is called multiple times
    has_console = any(getattr(h, "name", "") == "plantcare_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "plantcare_file" for h in root.handlers)
    added_handler = False

    # Console handler (force UTF-8 to avoid UnicodeEncodeError on Windows terminals)
    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "plantcare_console"
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    # File handler
    if log_file and not has_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "plantcare_file"
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    # Ensure handler levels follow the desired log level
    for handler in root.handlers:
        if getattr(handler, "name", "") in {"plantcare_console", "plantcare_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info("Logging initialized at level: %s", logging.getLevelName(log_level))

    if _env_bool("PLANTCARE_SILENCE_WERKZEUG", True):
        logging.getLogger("werkzeug").setLevel(logging.WARNING)

    # Socket.IO / Engine.IO polling logs are noisy at INFO
    if _env_bool("PLANTCARE_SILENCE_SOCKETIO", True):
        logging.getLogger("socketio").setLevel(logging.WARNING)
        logging.getLogger("engineio").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    return AppConfig()
