"""Flask extension instances shared across the application."""

import logging
import os

from flask import Flask
from flask_compress import Compress
from flask_socketio import SocketIO

logger = logging.getLogger(__name__)

# gzip/brotli for JSON responses
compress = Compress()


def _socketio_transports() -> list[str]:
    """
    Engine.IO transports from ``PLANTCARE_SOCKETIO_TRANSPORTS`` (comma separated).

    Polling only by default; the Werkzeug dev server cannot upgrade to websockets.
    """
    configured = [t.strip() for t in os.getenv("PLANTCARE_SOCKETIO_TRANSPORTS", "").split(",") if t.strip()]
    return configured or ["polling"]


# Threading mode needs neither eventlet nor gevent
socketio = SocketIO(
    async_mode="threading",
    cors_allowed_origins=[],
    logger=False,
    engineio_logger=False,
    ping_timeout=60,
    ping_interval=25,
    transports=_socketio_transports(),
)


def init_extensions(app: Flask, cors_origins: str) -> None:
    """Bind Flask-Compress and Flask-SocketIO to ``app``."""
    app.config.setdefault("COMPRESS_MIMETYPES", ["application/json"])
    app.config.setdefault("COMPRESS_MIN_SIZE", 512)
    compress.init_app(app)

    origins = cors_origins if isinstance(cors_origins, str) else "*"
    socketio.init_app(app, cors_allowed_origins=origins, logger=logging.getLogger("socketio"), engineio_logger=False)
    logger.info("Socket.IO ready (CORS origins: %s)", origins)
