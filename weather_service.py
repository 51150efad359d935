"""
Weather readings for the alert evaluator.
Normalizes provider payloads into one typed reading and fetches current
conditions from the OpenWeatherMap API.
"""
import logging
import os
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any
import requests

logger = logging.getLogger(__name__)

# OpenWeatherMap API
OPENWEATHER_API_URL = "https://api.openweathermap.org/data/2.5"


def _num(value, default=0.0) -> float:
    """Coerce a provider number; None or garbage becomes *default*."""
    try:
        return float(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def _dig(data: Dict, *path, default=None):
    for key in path:
        if not isinstance(data, dict):
            return default
        data = data.get(key)
    return default if data is None else data


@dataclass(frozen=True)
class WeatherReading:
    """
    A single current-conditions reading in imperial units.

    Missing numeric fields read as 0 (wind gust and precipitation
    probability included), so every threshold rule can be evaluated
    against any reading.
    """
    temperature_f: float
    wind_speed_mph: float
    humidity: float
    wind_gust_mph: float = 0.0
    precipitation_probability: float = 0.0
    condition: str = ""
    city: str = ""

    @classmethod
    def from_current_conditions(cls, payload: Dict[str, Any], city: str = "") -> "WeatherReading":
        """Build from an AccuWeather CurrentConditions payload (nested Imperial values)."""
        payload = payload or {}
        return cls(
            temperature_f=_num(_dig(payload, 'Temperature', 'Imperial', 'Value')),
            wind_speed_mph=_num(_dig(payload, 'Wind', 'Speed', 'Imperial', 'Value')),
            humidity=_num(payload.get('RelativeHumidity')),
            wind_gust_mph=_num(_dig(payload, 'WindGust', 'Speed', 'Imperial', 'Value')),
            precipitation_probability=_num(payload.get('PrecipitationProbability')),
            condition=payload.get('WeatherText') or "",
            city=city,
        )

    @classmethod
    def from_openweather(cls, payload: Dict[str, Any]) -> "WeatherReading":
        """Build from an OpenWeatherMap /weather response fetched with units=imperial."""
        payload = payload or {}
        weather = (payload.get('weather') or [{}])[0]
        return cls(
            temperature_f=_num(_dig(payload, 'main', 'temp')),
            wind_speed_mph=_num(_dig(payload, 'wind', 'speed')),
            humidity=_num(_dig(payload, 'main', 'humidity')),
            wind_gust_mph=_num(_dig(payload, 'wind', 'gust')),
            # pop is a 0-1 fraction when present
            precipitation_probability=_num(payload.get('pop')) * 100,
            condition=weather.get('description', '') if isinstance(weather, dict) else '',
            city=payload.get('name') or "",
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherReading":
        """Build from the flat JSON shape accepted by the HTTP API."""
        return cls(
            temperature_f=_num(data.get('temperature_f')),
            wind_speed_mph=_num(data.get('wind_speed_mph')),
            humidity=_num(data.get('humidity')),
            wind_gust_mph=_num(data.get('wind_gust_mph')),
            precipitation_probability=_num(data.get('precipitation_probability')),
            condition=str(data.get('condition') or ""),
            city=str(data.get('city') or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def get_current_reading(
    lat: float = None,
    lon: float = None,
    city: str = None,
    state: str = None
) -> Optional[WeatherReading]:
    """
    Get current conditions for a location.

    Args:
        lat, lon: Coordinates (preferred)
        city, state: City/state name (fallback)

    Returns:
        WeatherReading or None if unavailable
    """
    api_key = os.getenv("OPENWEATHER_API_KEY")
    if not api_key:
        logger.debug("No OpenWeatherMap API key configured")
        return None

    if lat is not None and lon is not None:
        params = {'lat': lat, 'lon': lon}
    elif city:
        params = {'q': f"{city},{state},US" if state else city}
    else:
        return None
    params.update({'appid': api_key, 'units': 'imperial'})

    try:
        response = requests.get(f"{OPENWEATHER_API_URL}/weather", params=params, timeout=5)
        response.raise_for_status()
        return WeatherReading.from_openweather(response.json())
    except requests.RequestException as e:
        logger.error(f"Weather API request failed: {e}")
        return None
    except ValueError as e:
        logger.error(f"Weather parsing failed: {e}")
        return None
