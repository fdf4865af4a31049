"""
Reminders API
=============

Routes are split by concern:
- crud.py: create, list, get, update, delete
- actions.py: complete, snooze, dismiss, bulk
- smart.py: upcoming/overdue/stats views, smart scheduling, weather adjustment
"""

from flask import Blueprint

from app.blueprints.api._common import register_error_handlers

reminders_api = Blueprint("reminders_api", __name__)
register_error_handlers(reminders_api)

# Route modules import reminders_api, so they load after it exists
from . import actions, crud, smart  # noqa: E402

__all__ = ["reminders_api"]
