"""
HTTP Response Helpers
=====================

JSON envelopes shared by every API blueprint:

- success: ``{"success": true, "data": ..., "message"?: str}``
- failure: ``{"success": false, "message": str, "error": {"status", "timestamp", ...}}``

Domain exceptions carry an ``http_status``; :func:`exception_response`
turns them into failure envelopes and :func:`safe_route` applies that
mapping to a view function.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from flask import Response, jsonify

from app.utils.time import iso_now

_log = logging.getLogger(__name__)

# Client-facing text for statuses whose real cause stays in the server log
_GENERIC_MESSAGES: dict[int, str] = {
    400: "Invalid request",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict",
    413: "Request payload too large",
    500: "An internal error occurred",
    502: "Upstream service unavailable",
}


def success_response(
    data: dict | list | None = None,
    status: int = 200,
    *,
    message: str | None = None,
) -> Response:
    body: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    response = jsonify(body)
    response.status_code = status
    return response


def error_response(
    message: str,
    status: int = 500,
    *,
    details: dict | None = None,
) -> Response:
    """Failure envelope; ``details`` are merged into the ``error`` object."""
    error: dict[str, Any] = {"status": status, "timestamp": iso_now()}
    if details:
        error.update(details)
    response = jsonify({"success": False, "message": message, "error": error})
    response.status_code = status
    return response


def safe_error(exc: BaseException, status: int = 500, *, context: str = "") -> Response:
    """
    Log ``exc`` with its traceback and answer with generic text only.

    Args:
        exc: The failure; its message never reaches the client
        status: Response status, also selects the generic message
        context: Short label for the log line, e.g. ``"completing reminder"``
    """
    _log.error("API error [%s] %s: %s", status, context, exc, exc_info=exc)
    return error_response(_GENERIC_MESSAGES.get(status, _GENERIC_MESSAGES[500]), status)


def exception_response(exc: BaseException, *, context: str = "") -> Response:
    """
    Map a domain exception to a failure envelope via its ``http_status``.

    4xx messages are written for the caller and surfaced with any ``detail``;
    5xx go through :func:`safe_error`.
    """
    status = int(getattr(exc, "http_status", 500))
    if status >= 500:
        return safe_error(exc, status, context=context or type(exc).__name__)
    message = str(exc) or _GENERIC_MESSAGES.get(status, "Request failed")
    return error_response(message, status, details=getattr(exc, "detail", None) or None)


def safe_route(error_message: str = "An internal error occurred", *, error_status: int = 500) -> Callable:
    """
    Wrap a view so domain errors map to their status and anything else to ``error_status``.

    Usage::

        @reminders_api.post("/<int:reminder_id>/snooze")
        @safe_route("Failed to snooze reminder")
        def snooze_reminder(reminder_id: int):
            ...
    """
    from app.domain.exceptions import PlantCareError

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Response:
            try:
                return fn(*args, **kwargs)
            except PlantCareError as exc:
                return exception_response(exc, context=error_message)
            except Exception as exc:
                return safe_error(exc, error_status, context=error_message)

        return wrapper

    return decorator
