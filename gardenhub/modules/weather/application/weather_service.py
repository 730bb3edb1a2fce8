# 📄 File: gardenhub/modules/weather/application/weather_service.py
# 🧭 Purpose (Layman Explanation):
# Keeps the latest garden weather on hand and refreshes it every half hour, so the
# weather widget is quick and never breaks when the forecast service is down.
# 🧪 Purpose (Technical Summary):
# Caches one WeatherSnapshot in process memory, refreshing it when older than the
# configured interval. Concurrent refreshes are serialized by an asyncio.Lock. Any
# failure yields the documented fallback snapshot instead of an error.
# 🔗 Dependencies:
# weather.domain.models, weather.infrastructure.open_meteo_client, gardenhub.shared
# 🔄 Connected Modules / Calls From:
# weather.presentation.api.v1.weather

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from gardenhub.shared.config.settings import get_settings
from gardenhub.shared.core.error_classification import handle_error
from gardenhub.shared.utils.logging import get_logger

from ..domain.models import WeatherSnapshot, fallback_snapshot, parse_forecast
from ..infrastructure.open_meteo_client import OpenMeteoClient, get_weather_client

logger = get_logger(__name__)


class WeatherService:

    def __init__(
        self,
        client: OpenMeteoClient,
        refresh_interval: timedelta,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.client = client
        self.refresh_interval = refresh_interval
        self.clock = clock
        self._snapshot: Optional[WeatherSnapshot] = None
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> Optional[WeatherSnapshot]:
        return self._snapshot

    def is_stale(self) -> bool:
        if self._snapshot is None:
            return True
        return self.clock() - self._snapshot.fetched_at >= self.refresh_interval

    async def get_weather(self) -> WeatherSnapshot:
        if not self.is_stale():
            return self._snapshot
        async with self._lock:
            if not self.is_stale():
                return self._snapshot
            return await self._refresh()

    async def refresh(self) -> WeatherSnapshot:
        async with self._lock:
            return await self._refresh()

    async def _refresh(self) -> WeatherSnapshot:
        now = self.clock()
        try:
            data = await self.client.get_forecast()
            snapshot = parse_forecast(data, now=now)
            logger.info("Weather refreshed", extra={"temp": snapshot.temp})
        except Exception as e:
            app_error = handle_error(e, operation="get_forecast")
            logger.error(
                f"Error fetching weather: {app_error.message}",
                extra={"error_type": app_error.error_type.value}
            )
            snapshot = fallback_snapshot(now)
        self._snapshot = snapshot
        return snapshot


_service: Optional[WeatherService] = None


def get_weather_service() -> WeatherService:
    global _service
    if _service is None:
        _service = WeatherService(
            client=get_weather_client(),
            refresh_interval=timedelta(minutes=get_settings().WEATHER_REFRESH_MINUTES),
        )
    return _service
