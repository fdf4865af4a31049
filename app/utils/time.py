"""
Time helpers.

Every datetime in the application is timezone-aware UTC. Persisted values
are ISO-8601 strings with an explicit ``+00:00`` offset, produced by
:func:`to_iso` and read back with :func:`coerce_datetime`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return utc_now().isoformat()


def ensure_utc(dt: datetime) -> datetime:
    """Naive values are taken to be UTC; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime | None) -> str | None:
    return ensure_utc(dt).isoformat() if dt is not None else None


def coerce_datetime(value: Any) -> datetime | None:
    """
    Best-effort conversion to an aware UTC datetime.

    Accepts datetimes and ISO-8601 strings (a trailing ``Z`` is allowed).
    Anything else, or an unparseable string, gives None.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None
