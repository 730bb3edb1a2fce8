"""
Core building blocks shared by every garden module:
exceptions, error classification, security and request dependencies.
"""

from .error_classification import get_user_friendly_message, handle_error
from .exceptions import ErrorType, GardenHubException

__all__ = [
    "ErrorType",
    "GardenHubException",
    "handle_error",
    "get_user_friendly_message",
]
