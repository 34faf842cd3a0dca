import pytest

from kinen.errors import (
    AuthorizationError,
    NetworkError,
    ServerError,
    describe_error,
    error_from_status,
    status_message,
)


@pytest.mark.parametrize(
    "status, message",
    [
        (400, "Bad request: Please check your input parameters"),
        (401, "Unauthorized: Authentication required"),
        (403, "Forbidden: You do not have permission to access this resource"),
        (422, "Validation error: The provided data is invalid"),
        (500, "Internal server error: Please try again later"),
        (502, "Bad gateway: Server is temporarily unavailable"),
        (503, "Service unavailable: Server is overloaded or down for maintenance"),
    ],
)
def test_status_table(status, message):
    assert status_message(status) == message


def test_unlisted_status_uses_reason():
    assert status_message(418, "I'm a teapot") == "HTTP Error 418: I'm a teapot"
    assert status_message(418) == "HTTP Error 418: Unknown error"


def test_error_from_status_classes():
    assert isinstance(error_from_status(401), AuthorizationError)
    assert isinstance(error_from_status(500), ServerError)


def test_body_needs_message_and_code_to_win():
    assert error_from_status(500, {"message": "Only message"}).message == (
        "Internal server error: Please try again later"
    )
    err = error_from_status(500, {"message": "Engine down", "code": "E42"})
    assert err.message == "Engine down"
    assert err.status == 500


def test_describe_error():
    info = describe_error(NetworkError("Network error: down"))
    assert (info.message, info.status) == ("Network error: down", None)
    assert describe_error(ServerError("x", 404)).status == 404
    assert describe_error(RuntimeError("")).message == "An unexpected error occurred"
    assert describe_error(RuntimeError("boom")).message == "boom"
