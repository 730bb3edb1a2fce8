# 📄 File: gardenhub/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# Names every way a garden request can fail (not signed in, not allowed, missing,
# bad input, database or network trouble) so users get a clear message.
# 🧪 Purpose (Technical Summary):
# Exception hierarchy whose classes carry the HTTP status, error code and ErrorType
# as class attributes; keyword context is folded into a details dict for the
# {"error": {...}} envelope and the board's error banners.
# 🔗 Dependencies:
# enum, typing, FastAPI status constants
# 🔄 Connected Modules / Calls From:
# gardenhub.shared.core.error_classification, gardenhub.main (exception handler),
# gardenhub.api.middleware.error_handling, every service and repository

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorType(str, Enum):
    """Categories every failure is sorted into before it reaches a user."""
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SERVER = "server"
    NETWORK = "network"
    UNKNOWN = "unknown"


class GardenHubException(Exception):
    """
    Base exception for the Community Garden Hub.

    Subclasses set ``status_code``, ``error_code``, ``error_type`` and
    ``default_message``. Extra keyword arguments (``resource_id=...``,
    ``table=...``) land in ``details`` unless they are None.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    error_type: ErrorType = ErrorType.UNKNOWN
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None,
        **context: Any
    ):
        self.message = message or self.default_message
        self.details = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        self.original_error = original_error
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.error_code,
                "type": self.error_type.value,
                "message": self.message,
                "details": self.details,
                "status_code": self.status_code,
            }
        }


# =============================================================================
# CALLER ERRORS
# =============================================================================

class AuthenticationError(GardenHubException):
    """Missing, expired or invalid access token, or no profile row."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_ERROR"
    error_type = ErrorType.AUTHENTICATION
    default_message = "Authentication failed"


class AuthorizationError(GardenHubException):
    """The member lacks the role or ownership an action requires."""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "AUTHORIZATION_ERROR"
    error_type = ErrorType.PERMISSION
    default_message = "Access denied"


class ValidationError(GardenHubException):
    """Input rejected here or by a database constraint."""
    status_code = 422
    error_code = "VALIDATION_ERROR"
    error_type = ErrorType.VALIDATION
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, value: Any = None, **kwargs: Any):
        super().__init__(message, value=None if value is None else str(value), **kwargs)


class NotFoundError(GardenHubException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    error_type = ErrorType.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(GardenHubException):
    """A write collides with existing data, e.g. a username already taken."""
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    error_type = ErrorType.VALIDATION
    default_message = "Resource conflict"


class BusinessRuleViolationError(GardenHubException):
    """
    The action is not allowed in the current state, such as volunteering
    for a task that someone else already took.
    """
    status_code = status.HTTP_409_CONFLICT
    error_code = "BUSINESS_RULE_VIOLATION"
    error_type = ErrorType.VALIDATION
    default_message = "Business rule violation"


# =============================================================================
# REMOTE SERVICE ERRORS
# =============================================================================

class GatewayError(GardenHubException):
    """The hosted database failed a request for a reason that is not the caller's fault."""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "GATEWAY_ERROR"
    error_type = ErrorType.SERVER
    default_message = "Database error"


class NetworkError(GardenHubException):
    """A remote service could not be reached at all (refused, DNS, timeout)."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "NETWORK_ERROR"
    error_type = ErrorType.NETWORK
    default_message = "Network error"


class ExternalAPIError(GardenHubException):
    """The weather provider answered with an error or an unreadable body."""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "EXTERNAL_API_ERROR"
    error_type = ErrorType.SERVER
    default_message = "External API error"
