"""
Care Logs API
=============

Endpoints for recording care events on plants. Logging watering or
fertilizing moves the plant's last-care marker forward and schedules the
first reminder for that care type when none is open.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response

from app.blueprints.api._common import (
    get_care_log_service as _care_log_service,
    get_user_id,
    parse_body,
    parse_query,
    register_error_handlers,
    success as _success,
)
from app.schemas import CareLogListQuery, CreateCareLogRequest
from app.utils.http import safe_route

logger = logging.getLogger("care_logs_api")

care_logs_api = Blueprint("care_logs_api", __name__)
register_error_handlers(care_logs_api)


@care_logs_api.post("")
@safe_route("Failed to log care")
def create_care_log() -> Response:
    """
    Record a care event.

    Request body:
        {"plantId": int, "careType": str, "notes": str,
         "careData": {...}, "performedAt": ISO-8601}
    """
    body = parse_body(CreateCareLogRequest)
    log = _care_log_service().log_care(
        get_user_id(),
        body.plant_id,
        body.care_type,
        notes=body.notes,
        care_data=body.care_data,
        performed_at=body.performed_at,
    )
    return _success(log.to_dict(), 201, message="Care logged")


@care_logs_api.get("")
@safe_route("Failed to list care logs")
def list_care_logs() -> Response:
    """Query params: plantId, careType, limit, offset"""
    query = parse_query(CareLogListQuery)
    logs = _care_log_service().list_care_logs(
        get_user_id(),
        plant_id=query.plant_id,
        care_type=query.care_type.value if query.care_type else None,
        limit=query.limit,
        offset=query.offset,
    )
    return _success({"care_logs": [log.to_dict() for log in logs], "count": len(logs)})


@care_logs_api.delete("/<int:care_log_id>")
@safe_route("Failed to delete care log")
def delete_care_log(care_log_id: int) -> Response:
    _care_log_service().delete_care_log(get_user_id(), care_log_id)
    return _success({"care_log_id": care_log_id}, message="Care log deleted")
