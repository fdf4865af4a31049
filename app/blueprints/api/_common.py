"""
Blueprint Common Utilities
==========================

Helpers shared by the API blueprints:

- the acting user (from the Flask session)
- JSON body / query-string validation into pydantic schemas
- response envelopes
- service accessors over the ServiceContainer
- 404/405 handlers in the API envelope

Usage:
    from app.blueprints.api._common import (
        get_user_id, parse_body, parse_query, success, get_reminder_service,
    )
"""
from __future__ import annotations

import logging
from typing import Any, TypeVar

from flask import Blueprint, current_app, request, session
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.domain.exceptions import ValidationError
from app.schemas.common import validation_details
from app.utils.http import error_response, success_response

logger = logging.getLogger("api._common")

M = TypeVar("M", bound=BaseModel)


def get_user_id() -> int:
    """Acting user; authentication is out of scope so this defaults to user 1."""
    return int(session.get("user_id", 1))


# ============================================================================
# REQUEST PARSING
# ============================================================================

def parse_body(model: type[M]) -> M:
    """
    Validate the JSON body against ``model``. A missing body validates as ``{}``.

    Raises:
        ValidationError: Body is not an object or fails validation; the
            pydantic errors are attached as ``detail["errors"]``
    """
    raw = request.get_json(silent=True)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(raw)
    except PydanticValidationError as ve:
        raise ValidationError("Invalid request", detail=validation_details(ve.errors())) from ve


def parse_query(model: type[M]) -> M:
    try:
        return model.model_validate(request.args.to_dict())
    except PydanticValidationError as ve:
        raise ValidationError("Invalid query parameters", detail=validation_details(ve.errors())) from ve


def success(data: dict | list | None = None, status: int = 200, *, message: str | None = None):
    return success_response(data, status, message=message)


# ============================================================================
# SERVICE ACCESSORS
# ============================================================================

def _service(name: str) -> Any:
    container = current_app.config.get("CONTAINER")
    if container is None:
        raise RuntimeError("ServiceContainer not found in app config")
    service = getattr(container, name, None)
    if service is None:
        raise RuntimeError(f"{name} not available")
    return service


def get_reminder_service():
    return _service("reminder_service")


def get_plant_service():
    return _service("plant_service")


def get_care_log_service():
    return _service("care_log_service")


def get_notifications_service():
    return _service("notifications_service")


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def register_error_handlers(blueprint: Blueprint) -> None:
    """Answer 404 and 405 inside ``blueprint`` with the API error envelope."""

    @blueprint.errorhandler(404)
    def _not_found(_error):
        return error_response("Resource not found", 404)

    @blueprint.errorhandler(405)
    def _method_not_allowed(_error):
        return error_response("Method not allowed", 405)
