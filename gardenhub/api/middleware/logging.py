"""
Request logging middleware.

Binds the request ID to the logging context for the lifetime of the request,
so every log line written while serving it carries the same correlation ID,
and logs one completion line per request.
"""

import time
from typing import Set

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from gardenhub.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)

EXCLUDED_PATHS: Set[str] = {"/api/v1/health", "/api/v1/health/live", "/favicon.ico"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        request_id = getattr(request.state, "request_id", None)
        start_time = time.time()

        with log_context(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception:
                logger.error(
                    f"{request.method} {request.url.path} failed",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "duration_ms": round((time.time() - start_time) * 1000, 2),
                    },
                )
                raise

            duration = time.time() - start_time
            extra = {
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2),
            }
            message = f"{request.method} {request.url.path} -> {response.status_code}"
            if duration >= self.slow_request_threshold:
                logger.warning(f"Slow request: {message}", extra=extra)
            elif response.status_code >= 500:
                logger.error(message, extra=extra)
            else:
                logger.info(message, extra=extra)
            return response
