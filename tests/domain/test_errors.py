from __future__ import annotations

import pytest

from dashlink.domain.errors import (
    ErrorKind,
    extract_error_message,
    field_errors_from,
    generic_http_message,
    kind_for_status,
)
from dashlink.domain.outcome import Failure


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (400, ErrorKind.VALIDATION),
        (401, ErrorKind.AUTH_EXPIRED),
        (403, ErrorKind.FORBIDDEN),
        (404, ErrorKind.NOT_FOUND),
        (409, ErrorKind.VALIDATION),
        (422, ErrorKind.VALIDATION),
        (500, ErrorKind.SERVER_ERROR),
        (503, ErrorKind.SERVER_ERROR),
    ],
)
def test_kind_for_status(status: int, kind: ErrorKind) -> None:
    assert kind_for_status(status) is kind


def test_extract_error_message_prefers_error_over_message() -> None:
    data = {"error": "Insufficient balance", "message": "Bad request"}

    assert extract_error_message(data, "ignored", 400) == "Insufficient balance"


def test_extract_error_message_serialises_structured_message() -> None:
    data = {"message": {"code": 7}}

    assert extract_error_message(data, None, 400) == '{"code": 7}'


def test_extract_error_message_joins_error_lists_and_maps() -> None:
    assert extract_error_message({"errors": ["a", "b"]}, None, 400) == "a, b"
    assert (
        extract_error_message({"errors": {"amount": ["too low"], "bankName": ["required"]}}, None, 422)
        == "too low, required"
    )


def test_extract_error_message_falls_back_to_raw_text() -> None:
    text = "  " + "x" * 300 + "  "

    message = extract_error_message(None, text, 502)

    assert message == "x" * 200


def test_extract_error_message_generates_generic_message() -> None:
    assert extract_error_message({}, "   ", 418) == generic_http_message(418)
    assert extract_error_message({}, "{}", 403) == generic_http_message(403)
    assert generic_http_message(418) == "HTTP error! status: 418"


def test_field_errors_only_for_validation_failures() -> None:
    details = {"errors": {"amount": ["must be positive"], "bankName": "required"}}
    validation = Failure(kind=ErrorKind.VALIDATION, message="invalid", details=details)
    server = Failure(kind=ErrorKind.SERVER_ERROR, message="boom", details=details)

    assert validation.field_errors == {"amount": ["must be positive"], "bankName": ["required"]}
    assert server.field_errors == {}
    assert field_errors_from("not a mapping") == {}
