"""
PlantCare application factory.

``create_app`` loads ``PLANTCARE_*`` configuration, sets up logging, binds
the Flask extensions, builds the ServiceContainer and mounts the versioned
JSON API under ``/api/v1``.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Any

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from app.blueprints.api.care_logs import care_logs_api
from app.blueprints.api.notifications import notifications_api
from app.blueprints.api.plants import plants_api
from app.blueprints.api.reminders import reminders_api
from app.config import load_config, setup_logging
from app.extensions import init_extensions, socketio

logger = logging.getLogger(__name__)

API_V1 = "/api/v1"


def _register_error_handlers(flask_app: Flask) -> None:
    from app.domain.exceptions import PlantCareError
    from app.utils.http import error_response, exception_response, safe_error

    @flask_app.errorhandler(Exception)
    def _handle_unhandled(exc):
        # Only /api/ answers in the JSON envelope; everything else keeps Flask's default
        if not request.path.startswith("/api/"):
            raise exc
        if isinstance(exc, HTTPException):
            status = int(exc.code or 500)
            if status >= 500:
                return safe_error(exc, status, context="http-exception")
            return error_response(exc.description or "Request failed", status)
        if isinstance(exc, PlantCareError):
            return exception_response(exc)
        return safe_error(exc, 500, context="unhandled")

    @flask_app.errorhandler(413)
    def _handle_too_large(_exc):
        return error_response("Request payload too large", 413)


def _register_blueprints(flask_app: Flask) -> None:
    flask_app.register_blueprint(reminders_api, url_prefix=f"{API_V1}/reminders")
    flask_app.register_blueprint(plants_api, url_prefix=f"{API_V1}/plants")
    flask_app.register_blueprint(care_logs_api, url_prefix=f"{API_V1}/care-logs")
    flask_app.register_blueprint(notifications_api, url_prefix=f"{API_V1}/notifications")
    logger.debug("Registered blueprints: %s", ", ".join(flask_app.blueprints))


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    """
    Build the Flask application.

    Args:
        config_overrides: AppConfig attribute overrides (keys are
            case-insensitive), applied after the environment is read
    """
    config = load_config().with_overrides(config_overrides)

    setup_logging(debug=config.DEBUG, log_file=config.log_file, level=config.log_level)

    flask_app = Flask(__name__)
    flask_app.config.update(config.as_flask_config())
    flask_app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=config.environment == "production",
    )

    # Socket.IO must be bound before the container builds the EmitterService
    init_extensions(flask_app, config.socketio_cors_origins)

    from app.services.container import ServiceContainer

    container = ServiceContainer.build(config, socketio=socketio)
    flask_app.config["CONTAINER"] = container
    flask_app.teardown_appcontext(container.database.close_db)

    shutdown_lock = threading.Lock()
    shutdown_done = False

    def _shutdown() -> None:
        nonlocal shutdown_done
        with shutdown_lock:
            if shutdown_done:
                return
            shutdown_done = True
        try:
            container.shutdown()
        except Exception as exc:
            logger.warning("Error during shutdown: %s", exc)

    atexit.register(_shutdown)

    _register_error_handlers(flask_app)
    _register_blueprints(flask_app)

    logger.info("PlantCare application initialized (database: %s)", config.database_path)
    return flask_app


__all__ = ["create_app", "socketio"]
