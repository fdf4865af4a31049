"""
Weather Service
===============

Current conditions and a short precipitation forecast for a location.
Uses the free Open-Meteo forecast API (no authentication required).

Features:
- Current temperature and relative humidity
- Daily precipitation totals for the next few days
- Caching per coordinate to minimize API calls

Failures raise UpstreamError. Callers schedule without weather in that case.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import requests

from app.constants import Timeouts, WeatherRules
from app.domain.exceptions import UpstreamError, ValidationError
from app.domain.weather import ForecastDay, WeatherSnapshot

logger = logging.getLogger(__name__)


class WeatherService:
    """
    Service fetching weather snapshots from Open-Meteo:
    https://open-meteo.com/en/docs
    """

    API_URL = "https://api.open-meteo.com/v1/forecast"

    def __init__(
        self,
        api_url: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        cache_minutes: int = 30,
        timeout: int = Timeouts.HTTP_REQUEST_TIMEOUT,
        forecast_days: int = WeatherRules.RAIN_LOOKAHEAD_DAYS,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize weather service.

        Args:
            api_url: Override for the forecast endpoint
            latitude: Default latitude when a plant has no coordinates
            longitude: Default longitude when a plant has no coordinates
            cache_minutes: Minutes to cache a snapshot per coordinate
            timeout: HTTP timeout in seconds
            forecast_days: Number of forecast days to request
        """
        self.api_url = api_url or self.API_URL
        self.default_latitude = latitude
        self.default_longitude = longitude
        self.cache_minutes = cache_minutes
        self.timeout = timeout
        self.forecast_days = forecast_days
        self._http = session or requests.Session()

        # Simple in-memory cache: {(lat, lng): (WeatherSnapshot, cached_at)}
        self._cache: Dict[Tuple[float, float], Tuple[WeatherSnapshot, datetime]] = {}

        logger.info("WeatherService initialized (lat=%s, lng=%s)", latitude, longitude)

    def get_weather(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> WeatherSnapshot:
        """
        Get current weather for a location.

        Args:
            latitude: Latitude (default: use configured default)
            longitude: Longitude (default: use configured default)

        Raises:
            ValidationError: No coordinates given and none configured
            UpstreamError: The weather API failed or returned garbage
        """
        lat = latitude if latitude is not None else self.default_latitude
        lng = longitude if longitude is not None else self.default_longitude
        if lat is None or lng is None:
            raise ValidationError("No location available for weather lookup")

        cache_key = (round(float(lat), 2), round(float(lng), 2))
        cached = self._get_cached(cache_key)
        if cached is not None:
            return cached

        snapshot = self._fetch_weather(*cache_key)
        self._cache[cache_key] = (snapshot, datetime.now())
        return snapshot

    def clear_cache(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._http.close()

    def _get_cached(self, cache_key: Tuple[float, float]) -> Optional[WeatherSnapshot]:
        """Get cached snapshot if still valid."""
        if cache_key not in self._cache:
            return None

        snapshot, cached_at = self._cache[cache_key]
        if datetime.now() - cached_at > timedelta(minutes=self.cache_minutes):
            del self._cache[cache_key]
            return None

        return snapshot

    def _fetch_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": "temperature_2m,relative_humidity_2m",
            "daily": "precipitation_sum",
            "forecast_days": self.forecast_days,
            "timezone": "UTC",
        }
        try:
            response = self._http.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.warning("Weather API request failed for (%s, %s): %s", latitude, longitude, exc)
            raise UpstreamError("Weather service unavailable") from exc
        except ValueError as exc:
            logger.warning("Weather API returned invalid JSON: %s", exc)
            raise UpstreamError("Weather service returned an invalid response") from exc

        return self._parse_api_response(data)

    @staticmethod
    def _parse_api_response(data: Dict[str, Any]) -> WeatherSnapshot:
        """Parse an Open-Meteo response into a WeatherSnapshot."""
        current = data.get("current") or {}
        temperature = current.get("temperature_2m")
        humidity = current.get("relative_humidity_2m")
        if temperature is None or humidity is None:
            raise UpstreamError("Weather response missing current conditions")

        daily = data.get("daily") or {}
        rainfall = daily.get("precipitation_sum") or []
        forecast = tuple(
            ForecastDay(days_ahead=index, rainfall_mm=float(amount or 0.0))
            for index, amount in enumerate(rainfall)
        )

        return WeatherSnapshot(
            temperature_c=float(temperature),
            humidity_pct=float(humidity),
            forecast=forecast,
        )
