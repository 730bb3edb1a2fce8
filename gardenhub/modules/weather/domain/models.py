# 📄 File: gardenhub/modules/weather/domain/models.py
# 🧭 Purpose (Layman Explanation):
# Turns the raw weather forecast into the few numbers the garden's weather widget shows,
# and supplies sensible placeholder weather when the forecast service is unavailable.
# 🧪 Purpose (Technical Summary):
# Weather snapshot models, Open-Meteo response parsing (rounded Fahrenheit values, today
# excluded from the daily list), temperature descriptions and the fallback snapshot.
# 🔗 Dependencies:
# pydantic, math, datetime
# 🔄 Connected Modules / Calls From:
# weather.application.weather_service, weather API router

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

DEFAULT_TEMP = 70
DEFAULT_HUMIDITY = 50
DEFAULT_MIN_TEMP = 50
FALLBACK_DESCRIPTION = "partly cloudy"
FALLBACK_FORECAST_DAYS = 6

CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,wind_speed_10m,precipitation_probability"
DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_probability_max"


class ForecastDay(BaseModel):
    date: str
    max_temp: int
    min_temp: int
    precipitation_probability: int


class WeatherSnapshot(BaseModel):
    temp: int
    humidity: int
    description: str
    wind_speed: int
    precipitation_probability: int
    forecast: List[ForecastDay] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_fallback: bool = False


def round_half_up(value: Optional[float], default: int = 0) -> int:
    """Round like a browser's Math.round (halves go up)."""
    if value is None:
        return default
    return int(math.floor(value + 0.5))


def describe_temperature(temp: Optional[float]) -> str:
    if temp is None:
        return "cold"
    if temp >= 85:
        return "hot and sunny"
    if temp >= 70:
        return "warm and pleasant"
    if temp >= 60:
        return "mild"
    if temp >= 50:
        return "cool"
    return "cold"


def parse_forecast(data: Dict[str, Any], now: Optional[datetime] = None) -> WeatherSnapshot:
    """
    Build a snapshot from an Open-Meteo ``/forecast`` response.

    Raises:
        ValueError: if ``current`` or ``daily`` is missing
    """
    current = (data or {}).get("current")
    daily = (data or {}).get("daily")
    if not current or not daily:
        raise ValueError("Invalid weather data format")

    dates = daily.get("time") or []
    maxima = daily.get("temperature_2m_max") or []
    minima = daily.get("temperature_2m_min") or []
    precipitation = daily.get("precipitation_probability_max") or []

    forecast = [
        ForecastDay(
            date=day,
            max_temp=round_half_up(maxima[i] if i < len(maxima) else None),
            min_temp=round_half_up(minima[i] if i < len(minima) else None),
            precipitation_probability=round_half_up(precipitation[i] if i < len(precipitation) else None),
        )
        for i, day in enumerate(dates)
    ]

    temperature = current.get("temperature_2m")
    return WeatherSnapshot(
        temp=round_half_up(temperature, DEFAULT_TEMP),
        humidity=round_half_up(current.get("relative_humidity_2m"), DEFAULT_HUMIDITY),
        description=describe_temperature(temperature),
        wind_speed=round_half_up(current.get("wind_speed_10m")),
        precipitation_probability=round_half_up(current.get("precipitation_probability")),
        # today is already shown as current conditions
        forecast=forecast[1:],
        fetched_at=now or datetime.now(timezone.utc),
    )


def fallback_snapshot(now: Optional[datetime] = None) -> WeatherSnapshot:
    now = now or datetime.now(timezone.utc)
    day = ForecastDay(
        date=now.isoformat(),
        max_temp=DEFAULT_TEMP,
        min_temp=DEFAULT_MIN_TEMP,
        precipitation_probability=0,
    )
    return WeatherSnapshot(
        temp=DEFAULT_TEMP,
        humidity=DEFAULT_HUMIDITY,
        description=FALLBACK_DESCRIPTION,
        wind_speed=0,
        precipitation_probability=0,
        forecast=[day] * FALLBACK_FORECAST_DAYS,
        fetched_at=now,
        is_fallback=True,
    )
