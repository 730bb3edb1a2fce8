"""
Tests for forecast parsing, the fallback snapshot and the cached weather service.
"""
from datetime import timedelta

import pytest

from gardenhub.modules.weather.application.weather_service import WeatherService
from gardenhub.modules.weather.domain.models import (
    describe_temperature,
    fallback_snapshot,
    parse_forecast,
)
from gardenhub.shared.core.exceptions import NetworkError

from conftest import FIXED_NOW

FORECAST = {
    "current": {
        "temperature_2m": 72.5,
        "relative_humidity_2m": 64.4,
        "wind_speed_10m": 5.5,
        "precipitation_probability": 10,
    },
    "daily": {
        "time": ["2024-05-01", "2024-05-02", "2024-05-03"],
        "temperature_2m_max": [80.2, 81.5, 79.4],
        "temperature_2m_min": [60.1, 61.6, 58.5],
        "precipitation_probability_max": [10, 20, 30],
    },
}


class FakeForecastClient:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.calls = 0

    async def get_forecast(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.data


@pytest.mark.parametrize("temp,expected", [
    (90, "hot and sunny"),
    (85, "hot and sunny"),
    (70, "warm and pleasant"),
    (65, "mild"),
    (50, "cool"),
    (49.9, "cold"),
])
def test_describe_temperature(temp, expected):
    assert describe_temperature(temp) == expected


def test_parse_forecast_rounds_and_skips_today():
    snapshot = parse_forecast(FORECAST, now=FIXED_NOW)
    assert snapshot.temp == 73
    assert snapshot.humidity == 64
    assert snapshot.wind_speed == 6
    assert snapshot.description == "warm and pleasant"
    assert [day.date for day in snapshot.forecast] == ["2024-05-02", "2024-05-03"]
    assert snapshot.forecast[0].max_temp == 82
    assert snapshot.forecast[1].min_temp == 59
    assert not snapshot.is_fallback


def test_parse_forecast_defaults_missing_values():
    snapshot = parse_forecast({"current": {"wind_speed_10m": 1}, "daily": {"time": []}})
    assert snapshot.temp == 70
    assert snapshot.humidity == 50
    assert snapshot.precipitation_probability == 0


def test_parse_forecast_rejects_incomplete_payload():
    with pytest.raises(ValueError):
        parse_forecast({"current": {"temperature_2m": 60}})


def test_fallback_snapshot():
    snapshot = fallback_snapshot(FIXED_NOW)
    assert snapshot.temp == 70
    assert snapshot.humidity == 50
    assert snapshot.description == "partly cloudy"
    assert len(snapshot.forecast) == 6
    assert all(day.max_temp == 70 and day.min_temp == 50 for day in snapshot.forecast)
    assert snapshot.is_fallback


async def test_service_caches_until_interval_elapses():
    now = [FIXED_NOW]
    client = FakeForecastClient(FORECAST)
    service = WeatherService(client, refresh_interval=timedelta(minutes=30), clock=lambda: now[0])

    await service.get_weather()
    now[0] = FIXED_NOW + timedelta(minutes=29)
    await service.get_weather()
    assert client.calls == 1

    now[0] = FIXED_NOW + timedelta(minutes=30)
    await service.get_weather()
    assert client.calls == 2


async def test_service_falls_back_on_failure():
    client = FakeForecastClient(error=NetworkError("down", service="open-meteo"))
    service = WeatherService(client, refresh_interval=timedelta(minutes=30), clock=lambda: FIXED_NOW)

    snapshot = await service.get_weather()
    assert snapshot.is_fallback
    assert snapshot.description == "partly cloudy"


async def test_forced_refresh_bypasses_cache():
    client = FakeForecastClient(FORECAST)
    service = WeatherService(client, refresh_interval=timedelta(minutes=30), clock=lambda: FIXED_NOW)
    await service.get_weather()
    await service.refresh()
    assert client.calls == 2
