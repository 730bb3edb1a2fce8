"""
Open-Meteo forecast client for the garden's coordinates.
"""

import logging
from typing import Any, Dict, Optional

from gardenhub.shared.config.settings import get_settings
from gardenhub.shared.infrastructure.external_apis.api_client import APIClient

from ..domain.models import CURRENT_FIELDS, DAILY_FIELDS

logger = logging.getLogger(__name__)


class OpenMeteoClient(APIClient):
    """
    Keyless Open-Meteo client. Temperatures are requested in Fahrenheit.
    """

    def __init__(
        self,
        base_url: str,
        latitude: float,
        longitude: float,
        forecast_days: int = 7,
        timeout: int = 10,
        max_retries: int = 3,
    ):
        super().__init__(base_url, api_name="open-meteo", timeout=timeout, max_retries=max_retries)
        self.latitude = latitude
        self.longitude = longitude
        self.forecast_days = forecast_days

    def forecast_params(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "current": CURRENT_FIELDS,
            "daily": DAILY_FIELDS,
            "temperature_unit": "fahrenheit",
            "timezone": "auto",
            "forecast_days": self.forecast_days,
        }

    async def get_forecast(self) -> Dict[str, Any]:
        return await self.get("forecast", params=self.forecast_params())


_client: Optional[OpenMeteoClient] = None


def get_weather_client() -> OpenMeteoClient:
    global _client
    if _client is None:
        config = get_settings().get_weather_api_config()
        _client = OpenMeteoClient(
            base_url=config["api_url"],
            latitude=config["latitude"],
            longitude=config["longitude"],
            forecast_days=config["forecast_days"],
            timeout=config["timeout"],
            max_retries=config["max_retries"],
        )
    return _client


async def cleanup_weather_client() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
        logger.info("Weather client cleanup completed")
