"""
Socket.IO Emitters
==================

Pushes real-time events to connected clients through Flask-SocketIO.
Each user has a room named ``user_<id>``; notifications go out on the
``/notifications`` namespace.

Emitting never raises: a failed emit is logged and reported as False so
the caller's database work is unaffected.
"""

import logging

from flask_socketio import SocketIO

logger = logging.getLogger("emitters")

WS_EVENT_NOTIFICATION = "notification"
SOCKETIO_NAMESPACE_NOTIFICATIONS = "/notifications"


def user_room(user_id: int) -> str:
    return f"user_{user_id}"


class EmitterService:
    """Thin wrapper over a SocketIO instance."""

    def __init__(self, sio: SocketIO):
        self.sio = sio

    def emit(self, event: str, payload: dict, room: str | None = None, namespace: str = "/") -> bool:
        """Emit ``event`` to ``room``, or broadcast when no room is given."""
        try:
            self.sio.emit(event, payload, to=room, namespace=namespace)
        except Exception as exc:
            logger.exception("Failed to emit '%s' to %s: %s", event, room or "broadcast", exc)
            return False
        logger.debug("Emitted '%s' on %s to %s", event, namespace, room or "broadcast")
        return True

    def emit_notification(self, user_id: int, payload: dict) -> bool:
        return self.emit(
            WS_EVENT_NOTIFICATION,
            payload,
            room=user_room(user_id),
            namespace=SOCKETIO_NAMESPACE_NOTIFICATIONS,
        )
