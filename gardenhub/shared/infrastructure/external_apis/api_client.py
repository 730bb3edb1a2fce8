# 📄 File: gardenhub/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# A dependable way to call outside services (like the weather forecast) that retries
# when the connection hiccups and reports clearly when the service is down.

# 🧪 Purpose (Technical Summary):
# Async JSON client over a lazily opened aiohttp ClientSession. Transport errors and
# timeouts are retried by tenacity with exponential backoff; non-2xx statuses and bad
# bodies become ExternalAPIError. Keeps request counters and the last few failures
# for the readiness probe.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - tenacity: Retry logic and backoff strategies

# 🔄 Connected Modules / Calls From:
# Used by: gardenhub.modules.weather.infrastructure.open_meteo_client,
# gardenhub.api.v1.health (get_stats)

import asyncio
import logging
import time
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, Optional
from urllib.parse import urljoin

import aiohttp
from aiohttp import ClientSession, ClientTimeout
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from gardenhub.shared.core.exceptions import ExternalAPIError, NetworkError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (aiohttp.ClientConnectionError, asyncio.TimeoutError)
ERROR_HISTORY_SIZE = 50
# Weight of the newest sample in the moving average
RESPONSE_TIME_SMOOTHING = 0.3


@dataclass
class RequestStats:
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_time: float = 0.0
    last_request_time: Optional[str] = None

    def started(self) -> None:
        self.total_requests += 1
        self.last_request_time = datetime.now(timezone.utc).isoformat()

    def responded(self, seconds: float) -> None:
        if self.average_response_time == 0:
            self.average_response_time = seconds
        else:
            self.average_response_time += RESPONSE_TIME_SMOOTHING * (seconds - self.average_response_time)

    @property
    def error_rate(self) -> float:
        return self.failed_requests / max(self.total_requests, 1) * 100


class APIClient:
    """
    Async client for keyless JSON APIs.

    Subclasses add endpoint helpers on top of ``get()``.
    """

    def __init__(
        self,
        base_url: str,
        api_name: str,
        timeout: int = 10,
        max_retries: int = 3,
        backoff_min: float = 1,
        backoff_max: float = 8,
    ):
        self.base_url = base_url.rstrip('/') + '/'
        self.api_name = api_name
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_min = backoff_min
        self.backoff_max = backoff_max
        self.session: Optional[ClientSession] = None
        self.stats = RequestStats()
        self.recent_errors: Deque[Dict[str, Any]] = deque(maxlen=ERROR_HISTORY_SIZE)

    def _open_session(self) -> ClientSession:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                connector=aiohttp.TCPConnector(limit=10, limit_per_host=5, ttl_dns_cache=300),
                headers={'Accept': 'application/json', 'User-Agent': 'GardenHub/1.0'},
            )
            logger.info(f"HTTP session opened for {self.api_name}")
        return self.session

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a JSON document, retrying transport failures.

        Raises:
            NetworkError: service unreachable after all attempts
            ExternalAPIError: non-2xx response or unparseable body
        """
        url = urljoin(self.base_url, endpoint.lstrip('/'))
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=self.backoff_min, max=self.backoff_max),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._get_once(url, params)
        except RETRYABLE_ERRORS as e:
            self._remember_failure(e, url)
            raise NetworkError(
                f"{self.api_name} unreachable: {e}", service=self.api_name, original_error=e
            ) from e

    async def _get_once(self, url: str, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        session = self._open_session()
        self.stats.started()
        started = time.perf_counter()
        try:
            async with session.get(url, params=params) as response:
                self.stats.responded(time.perf_counter() - started)
                if response.status >= 300:
                    body = await response.text()
                    raise ExternalAPIError(
                        f"{self.api_name} answered {response.status}: {body[:200]}",
                        api_name=self.api_name,
                        upstream_status=response.status,
                    )
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise ExternalAPIError(
                        f"Invalid JSON from {self.api_name}", api_name=self.api_name, original_error=e
                    ) from e
        except ExternalAPIError as e:
            self.stats.failed_requests += 1
            self._remember_failure(e, url)
            raise
        except RETRYABLE_ERRORS:
            self.stats.failed_requests += 1
            raise

        self.stats.successful_requests += 1
        logger.debug(f"{self.api_name} GET {url} -> {response.status}")
        return data

    def _remember_failure(self, error: Exception, url: str) -> None:
        record = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'error_type': type(error).__name__,
            'error_message': str(error),
            'url': url,
        }
        self.recent_errors.append(record)
        logger.error(f"{self.api_name} request failed: {record}")

    def get_stats(self) -> Dict[str, Any]:
        return {
            **asdict(self.stats),
            'api_name': self.api_name,
            'error_rate': self.stats.error_rate,
            'recent_errors': len(self.recent_errors),
        }

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None
            logger.info(f"HTTP session closed for {self.api_name}")
