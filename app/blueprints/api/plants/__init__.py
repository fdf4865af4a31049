"""
Plants API
==========

Plant registry (crud.py). Each plant's care intervals and last-care dates
are what the reminder scheduler computes due dates from.
"""

from flask import Blueprint

from app.blueprints.api._common import register_error_handlers

plants_api = Blueprint("plants_api", __name__)
register_error_handlers(plants_api)

# Route modules import plants_api, so they load after it exists
from . import crud  # noqa: E402

__all__ = ["plants_api"]
