"""Current weather from WeatherAPI.com, used for location-aware diet advice."""
from typing import Any, Dict

import requests

from ayurdiet.core.config import settings
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

REQUEST_TIMEOUT = 10


class WeatherError(Exception):
    """Weather data could not be fetched."""


def _current(query: str) -> Dict[str, Any]:
    if not settings.WEATHER_API_KEY:
        raise WeatherError("Weather API key not configured")

    try:
        resp = requests.get(
            f"{settings.WEATHER_API_BASE_URL}/current.json",
            params={"key": settings.WEATHER_API_KEY, "q": query, "aqi": "no"},
            timeout=REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        data = resp.json()
        return {
            "temperature": data["current"]["temp_c"],
            "humidity": data["current"]["humidity"],
            "description": data["current"]["condition"]["text"],
            # kph -> m/s
            "windSpeed": round(data["current"]["wind_kph"] / 3.6, 2),
            "location": data["location"]["name"],
        }
    except (requests.RequestException, KeyError, ValueError) as exc:
        logger.error("Weather lookup for %r failed: %s", query, exc)
        raise WeatherError("Weather data not available") from exc


def by_coordinates(lat: float, lon: float) -> Dict[str, Any]:
    return _current(f"{lat},{lon}")


def by_city(city: str) -> Dict[str, Any]:
    return _current(city)
