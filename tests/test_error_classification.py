"""
Tests for gateway error classification and user-facing messages.
"""
import httpx
import pytest
from postgrest import APIError

from gardenhub.shared.core.error_classification import (
    USER_FRIENDLY_MESSAGES,
    classify_gateway_error,
    get_user_friendly_message,
    handle_error,
    try_catch,
)
from gardenhub.shared.core.exceptions import (
    AuthorizationError,
    ErrorType,
    GardenHubException,
    NetworkError,
    NotFoundError,
    ValidationError,
)


def _api_error(code, message="boom") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


@pytest.mark.parametrize("code,message,expected", [
    ("42501", "denied", ErrorType.AUTHENTICATION),
    (None, "authentication required", ErrorType.AUTHENTICATION),
    (None, "permission denied for table tasks", ErrorType.PERMISSION),
    (None, "Permission denied", ErrorType.SERVER),
    (None, "row not found", ErrorType.NOT_FOUND),
    ("42503", "denied", ErrorType.PERMISSION),
    ("22P02", "bad uuid", ErrorType.NOT_FOUND),
    ("23505", "duplicate key", ErrorType.VALIDATION),
    ("23502", "null value", ErrorType.VALIDATION),
    ("XX000", "internal", ErrorType.SERVER),
])
def test_classify_gateway_error(code, message, expected):
    assert classify_gateway_error(code, message) == expected


def test_handle_error_maps_api_error_to_exception_class():
    error = handle_error(_api_error("23505", "duplicate key"), operation="insert", table="profiles")
    assert isinstance(error, ValidationError)
    assert error.details["code"] == "23505"
    assert error.details["table"] == "profiles"

    assert isinstance(handle_error(_api_error("42503")), AuthorizationError)
    assert isinstance(handle_error(_api_error("22P02")), NotFoundError)


def test_transport_failures_are_network_errors():
    assert isinstance(handle_error(httpx.ConnectError("refused")), NetworkError)
    assert isinstance(handle_error(RuntimeError("network is down")), NetworkError)
    assert not isinstance(handle_error(RuntimeError("Network is down")), NetworkError)


def test_handle_error_passes_application_errors_through():
    original = NotFoundError("gone")
    assert handle_error(original) is original


def test_unknown_errors_fall_back():
    error = handle_error(RuntimeError("odd"))
    assert type(error) is GardenHubException
    assert error.error_type == ErrorType.UNKNOWN
    assert handle_error("plain text").message == "plain text"


def test_one_friendly_message_per_category():
    assert get_user_friendly_message(httpx.ConnectError("x")) == USER_FRIENDLY_MESSAGES[ErrorType.NETWORK]
    assert get_user_friendly_message(_api_error("42503")) == (
        "You do not have permission to perform this action."
    )


async def test_try_catch_reports_and_returns_none():
    seen = []

    async def failing():
        raise httpx.ConnectError("refused")

    assert await try_catch(failing, seen.append) is None
    assert seen[0].error_type == ErrorType.NETWORK


async def test_try_catch_returns_result():
    async def ok():
        return 42

    assert await try_catch(ok) == 42


def test_validation_error_envelope():
    error = ValidationError("Bad soil pH", field="soil_ph", value=15)
    body = error.to_dict()["error"]
    assert body["status_code"] == 422
    assert body["type"] == "validation"
    assert body["details"] == {"field": "soil_ph", "value": "15"}
