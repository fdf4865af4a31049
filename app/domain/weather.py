"""
Weather value objects consumed by the reminder scheduler.

The weather provider returns a :class:`WeatherSnapshot`; the scheduler turns
it into a :class:`WeatherAssessment` (an impact directive plus the reason shown
to the user).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.enums.reminders import WeatherImpact


@dataclass(frozen=True)
class ForecastDay:
    """Expected rainfall for one day. ``days_ahead`` 0 is today."""

    days_ahead: int
    rainfall_mm: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"days_ahead": self.days_ahead, "rainfall_mm": self.rainfall_mm}


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions plus a short precipitation forecast."""

    temperature_c: float
    humidity_pct: float
    forecast: tuple[ForecastDay, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature_c,
            "humidity": self.humidity_pct,
            "forecast": [day.to_dict() for day in self.forecast],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "WeatherSnapshot":
        forecast = tuple(
            ForecastDay(
                days_ahead=int(day.get("days_ahead", day.get("daysAhead", 0))),
                rainfall_mm=float(day.get("rainfall_mm", day.get("rainfallMm", 0.0)) or 0.0),
            )
            for day in data.get("forecast") or []
        )
        return WeatherSnapshot(
            temperature_c=float(data.get("temperature", 0.0)),
            humidity_pct=float(data.get("humidity", 0.0)),
            forecast=forecast,
        )


@dataclass(frozen=True)
class WeatherAssessment:
    impact: WeatherImpact = WeatherImpact.NONE
    reason: str | None = None

    @property
    def has_impact(self) -> bool:
        return self.impact is not WeatherImpact.NONE
