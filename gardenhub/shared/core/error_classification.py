# 📄 File: gardenhub/shared/core/error_classification.py
# 🧭 Purpose (Layman Explanation):
# Looks at whatever went wrong when talking to the hosted database or another service,
# decides what kind of problem it was, and picks one short friendly sentence to show the member.
# 🧪 Purpose (Technical Summary):
# Classifies PostgREST error payloads and transport failures into ErrorType categories,
# normalizes arbitrary exceptions into the GardenHubException hierarchy and maps each
# category to a single user-facing message.
# 🔗 Dependencies:
# postgrest (APIError), httpx and aiohttp transport errors, gardenhub.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# gardenhub.shared.infrastructure.database.gateway, task board services, API routers

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Type, TypeVar

import aiohttp
import httpx
from postgrest import APIError

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ErrorType,
    GardenHubException,
    GatewayError,
    NetworkError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL SQLSTATE codes surfaced by PostgREST
AUTHENTICATION_CODES = {"42501"}
PERMISSION_CODES = {"42503"}
NOT_FOUND_CODES = {"22P02"}
VALIDATION_CODES = {
    "23502",  # not_null_violation
    "23503",  # foreign_key_violation
    "23505",  # unique_violation
    "23514",  # check_violation
}

TRANSPORT_ERRORS = (
    httpx.TransportError,
    aiohttp.ClientConnectionError,
    asyncio.TimeoutError,
    ConnectionError,
)

USER_FRIENDLY_MESSAGES: Dict[ErrorType, str] = {
    ErrorType.AUTHENTICATION: "Authentication error. Please log in again.",
    ErrorType.PERMISSION: "You do not have permission to perform this action.",
    ErrorType.NOT_FOUND: "The requested resource was not found.",
    ErrorType.VALIDATION: "Invalid input. Please check your data and try again.",
    ErrorType.NETWORK: "Network connection issue. Please check your internet connection.",
    ErrorType.SERVER: "Server error. Our team has been notified.",
    ErrorType.UNKNOWN: "An unexpected error occurred. Please try again later.",
}


def classify_gateway_error(code: Optional[str], message: Optional[str]) -> ErrorType:
    """
    Classify a PostgREST error payload by its SQLSTATE code and message.

    Args:
        code: SQLSTATE or PostgREST error code
        message: Error message returned by the gateway

    Returns:
        ErrorType: Category of the failure (defaults to SERVER)
    """
    code = (code or "").strip()
    text = message or ""

    if code in AUTHENTICATION_CODES or "authentication" in text:
        return ErrorType.AUTHENTICATION
    if code in PERMISSION_CODES or "permission" in text:
        return ErrorType.PERMISSION
    if code in NOT_FOUND_CODES or "not found" in text:
        return ErrorType.NOT_FOUND
    if code in VALIDATION_CODES:
        return ErrorType.VALIDATION
    return ErrorType.SERVER


EXCEPTION_BY_TYPE: Dict[ErrorType, Type[GardenHubException]] = {
    ErrorType.AUTHENTICATION: AuthenticationError,
    ErrorType.PERMISSION: AuthorizationError,
    ErrorType.NOT_FOUND: NotFoundError,
    ErrorType.VALIDATION: ValidationError,
    ErrorType.NETWORK: NetworkError,
    ErrorType.SERVER: GatewayError,
}


def handle_error(error: Any, operation: Optional[str] = None, table: Optional[str] = None) -> GardenHubException:
    """
    Convert any error to a GardenHubException carrying its ErrorType.

    Args:
        error: Exception (or message string) raised by a remote call
        operation: Optional operation name for error details
        table: Optional table name for error details

    Returns:
        GardenHubException: Normalized application error
    """
    if isinstance(error, GardenHubException):
        return error

    details: Dict[str, Any] = {}
    if operation:
        details["operation"] = operation
    if table:
        details["table"] = table

    if isinstance(error, APIError):
        error_type = classify_gateway_error(error.code, error.message)
        if error.code:
            details["code"] = error.code
        if error.hint:
            details["hint"] = error.hint
        exception_class = EXCEPTION_BY_TYPE.get(error_type, GardenHubException)
        return exception_class(f"Database error: {error.message}", details=details, original_error=error)

    if isinstance(error, TRANSPORT_ERRORS):
        return NetworkError(f"Network error: {error}", details=details, original_error=error)

    if isinstance(error, Exception):
        if "network" in str(error):
            return NetworkError(f"Network error: {error}", details=details, original_error=error)
        return GardenHubException(str(error) or type(error).__name__, details=details, original_error=error)

    if isinstance(error, str):
        return GardenHubException(error, details=details)

    return GardenHubException("An unknown error occurred", details=details)


def get_user_friendly_message(error: Any) -> str:
    """Get the single user-facing message for the error's category."""
    app_error = handle_error(error)
    return USER_FRIENDLY_MESSAGES.get(app_error.error_type, USER_FRIENDLY_MESSAGES[ErrorType.UNKNOWN])


async def try_catch(
    fn: Callable[[], Awaitable[T]],
    error_handler: Optional[Callable[[GardenHubException], None]] = None
) -> Optional[T]:
    """
    Run a coroutine factory and report any failure instead of raising it.

    Args:
        fn: Zero-argument callable returning an awaitable
        error_handler: Optional callback receiving the normalized error

    Returns:
        The awaited result, or None if an error occurred
    """
    try:
        return await fn()
    except Exception as e:
        app_error = handle_error(e)
        if error_handler:
            error_handler(app_error)
        else:
            logger.error(f"{app_error.error_type.value} error: {app_error.message}")
        return None
