# 📄 File: gardenhub/api/middleware/error_handling.py
# 🧭 Purpose (Layman Explanation):
# Catches anything that goes badly wrong while answering a request and sends back a
# tidy error message instead of a crash, tagged so the problem can be found in the logs.
# 🧪 Purpose (Technical Summary):
# Outermost HTTP middleware: assigns a request ID, stamps X-Request-ID / X-Response-Time
# headers and converts unhandled exceptions into the standard error envelope.
# Domain errors (GardenHubException) are rendered by the app-level exception handler
# before they reach this layer.
# 🔗 Dependencies:
# starlette BaseHTTPMiddleware, gardenhub.shared.core.exceptions, gardenhub.shared.config
# 🔄 Connected Modules / Calls From:
# gardenhub.main (middleware registration)

import logging
import time
import traceback
import uuid
from datetime import datetime
from typing import Any, Dict, NamedTuple

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from gardenhub.shared.config.settings import get_settings
from gardenhub.shared.core.exceptions import ErrorType, GardenHubException

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorInfo(NamedTuple):
    status_code: int
    code: str
    type: str
    message: str
    details: Dict[str, Any]


# Builtin failures that escape a router, checked in order
BUILTIN_ERRORS = (
    (ValueError, 400, ErrorType.VALIDATION, "Invalid request data"),
    (KeyError, 400, ErrorType.VALIDATION, "Missing required field"),
    (ConnectionError, 503, ErrorType.NETWORK, "Service connection failed"),
    (TimeoutError, 504, ErrorType.NETWORK, "Request timeout"),
)


def describe_exception(exc: Exception) -> ErrorInfo:
    """Status, code and message for any exception that reached the middleware."""
    if isinstance(exc, GardenHubException):
        return ErrorInfo(exc.status_code, exc.error_code, exc.error_type.value, exc.message, exc.details)
    if isinstance(exc, HTTPException):
        return ErrorInfo(exc.status_code, f"HTTP_{exc.status_code}", ErrorType.UNKNOWN.value, str(exc.detail), {})
    for exc_type, status_code, error_type, message in BUILTIN_ERRORS:
        if isinstance(exc, exc_type):
            return ErrorInfo(status_code, exc_type.__name__.upper(), error_type.value, message, {})
    return ErrorInfo(500, "INTERNAL_SERVER_ERROR", ErrorType.UNKNOWN.value, "An internal server error occurred", {})


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Outermost middleware: request ids, timing headers, and a JSON envelope
    for anything the routers let escape.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            response = self._error_response(request, exc, request_id)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{time.perf_counter() - started:.3f}s"
        return response

    def _error_response(self, request: Request, exc: Exception, request_id: str) -> JSONResponse:
        info = describe_exception(exc)
        where = f"{request.method} {request.url.path}"
        log_extra = {
            "request_id": request_id,
            "status_code": info.status_code,
            "exception_type": type(exc).__name__,
        }
        if info.status_code >= 500:
            logger.error(f"Server error in {where}", extra=log_extra, exc_info=True)
        else:
            logger.warning(f"Client error in {where}: {exc}", extra=log_extra)

        body: Dict[str, Any] = {
            "code": info.code,
            "type": info.type,
            "message": info.message,
            "details": info.details,
            "timestamp": datetime.now().isoformat(),
            "request_id": request_id,
            "path": request.url.path,
        }
        settings = get_settings()
        if settings.DEBUG and not settings.is_production:
            body["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc().splitlines(),
            }

        response = JSONResponse(status_code=info.status_code, content={"error": body})
        response.headers["X-Error-Code"] = info.code
        return response
