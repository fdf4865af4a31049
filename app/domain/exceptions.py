"""Errors raised by the reminder scheduler, the services and the SQLite layer.

Each class carries the HTTP status the API answers with; ``safe_route`` and
``exception_response`` in ``app/utils/http.py`` read ``http_status`` and
``detail`` and build the failure envelope from them.

::

    PlantCareError                 500
    ├── ValidationError            400  bad request body, frequency < 1, snooze hours
    ├── NotFoundError              404  unknown id, or owned by another user
    ├── ConflictError              409  transition out of completed/dismissed
    │   └── LimitExceededError     409  snooze_count reached max_snoozes
    ├── ServiceError               500
    │   ├── RepositoryError        500  SQLite write or read failed
    │   └── UpstreamError          502  weather lookup failed
    └── ConfigurationError         500  PLANTCARE_* value out of range
"""

from __future__ import annotations


class PlantCareError(Exception):
    """Base class.

    ``detail`` is structured context (ids, counts, field errors). For 4xx
    errors it is merged into the ``error`` object of the response; for 5xx
    it is only logged.
    """

    http_status: int = 500

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


# ── 4xx ──────────────────────────────────────────────────────────────


class ValidationError(PlantCareError):
    """Input the scheduler or a service cannot act on.

    Pydantic failures from ``parse_body`` arrive here with the per-field
    list under ``detail["errors"]``.
    """

    http_status: int = 400


class NotFoundError(PlantCareError):
    """Reminder, plant, care log or notification missing for this user.

    Another user's record is reported the same way as a missing one.
    """

    http_status: int = 404


class ConflictError(PlantCareError):
    """The reminder's status forbids the action, e.g. snoozing a completed one,
    or weather adjustment was requested while weather is disabled."""

    http_status: int = 409


class LimitExceededError(ConflictError):
    """Snooze refused because the reminder has used all of its snoozes."""


# ── 5xx ──────────────────────────────────────────────────────────────


class ServiceError(PlantCareError):
    http_status: int = 500


class RepositoryError(ServiceError):
    """A reminder, plant, care log or notification could not be stored or read."""

    http_status: int = 500


class UpstreamError(ServiceError):
    """The weather provider failed or returned an unusable payload.

    Create, complete and smart-schedule log it and continue without weather;
    ``POST /reminders/weather-adjust`` answers 502.
    """

    http_status: int = 502


class ConfigurationError(PlantCareError):
    """Unknown setting, or a snooze cap, season name or seasonal multiplier out of range."""

    http_status: int = 500
