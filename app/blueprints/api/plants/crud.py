"""
Plant CRUD Operations
=====================

Endpoints for registering, reading, updating and deleting plants.
Deleting a plant removes its reminders and care logs.
"""

from __future__ import annotations

import logging

from flask import Response

from app.blueprints.api._common import (
    get_plant_service as _plant_service,
    get_user_id,
    parse_body,
    success as _success,
)
from app.schemas import CreatePlantRequest, UpdatePlantRequest
from app.utils.http import safe_route

from . import plants_api

logger = logging.getLogger("plants_api.crud")


# ============================================================================
# PLANT CRUD OPERATIONS
# ============================================================================


@plants_api.get("")
@safe_route("Failed to list plants")
def list_plants() -> Response:
    """List the current user's plants"""
    plants = _plant_service().list_plants(get_user_id())
    return _success({"plants": [p.to_dict() for p in plants], "count": len(plants)})


@plants_api.post("")
@safe_route("Failed to add plant")
def add_plant() -> Response:
    """Register a new plant"""
    body = parse_body(CreatePlantRequest)
    fields = body.model_dump(exclude_none=True)
    name = fields.pop("name")
    plant = _plant_service().create_plant(get_user_id(), name, **fields)
    logger.info("Plant %s registered", plant.plant_id)
    return _success(plant.to_dict(), 201, message="Plant created")


@plants_api.get("/<int:plant_id>")
@safe_route("Failed to get plant")
def get_plant(plant_id: int) -> Response:
    plant = _plant_service().get_plant(get_user_id(), plant_id)
    return _success(plant.to_dict())


@plants_api.put("/<int:plant_id>")
@safe_route("Failed to update plant")
def update_plant(plant_id: int) -> Response:
    body = parse_body(UpdatePlantRequest)
    plant = _plant_service().update_plant(get_user_id(), plant_id, body.model_dump(exclude_unset=True))
    return _success(plant.to_dict(), message="Plant updated")


@plants_api.delete("/<int:plant_id>")
@safe_route("Failed to remove plant")
def remove_plant(plant_id: int) -> Response:
    """Delete a plant along with its reminders and care logs"""
    _plant_service().delete_plant(get_user_id(), plant_id)
    return _success({"plant_id": plant_id}, message="Plant deleted")
