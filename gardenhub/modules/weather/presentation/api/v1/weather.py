"""
Garden weather endpoints. Public: the widget is shown before sign-in too.
"""

from fastapi import APIRouter, Depends

from ....application.weather_service import WeatherService, get_weather_service
from ....domain.models import WeatherSnapshot

weather_router = APIRouter()


@weather_router.get("/", response_model=WeatherSnapshot, summary="Current garden weather")
async def get_weather(service: WeatherService = Depends(get_weather_service)) -> WeatherSnapshot:
    """Cached snapshot, refreshed when older than the configured interval."""
    return await service.get_weather()


@weather_router.post("/refresh", response_model=WeatherSnapshot, summary="Refresh garden weather now")
async def refresh_weather(service: WeatherService = Depends(get_weather_service)) -> WeatherSnapshot:
    return await service.refresh()
