"""Closed error taxonomy for the request layer.

Every failure that reaches a caller is expressed as one of the ``ErrorKind`` members.
The helpers below are pure: the same status/body pair always maps to the same kind
and message.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Final, cast

NETWORK_ERROR_MESSAGE: Final[str] = "Network error occurred"
UNAUTHORIZED_MESSAGE: Final[str] = "You are not authorized to access this resource"
FORBIDDEN_MESSAGE: Final[str] = "You do not have permission to access this resource"
NOT_FOUND_MESSAGE: Final[str] = "Resource not found"
INCOMPLETE_RESPONSE_MESSAGE: Final[str] = "The server response was cut off before it completed"
MALFORMED_PAYLOAD_MESSAGE: Final[str] = "The server returned an unreadable response"

_RAW_TEXT_LIMIT: Final[int] = 200


class ErrorKind(StrEnum):
    """Every way a request can fail, as seen by callers."""

    TRANSPORT = "transport"
    PROTOCOL_ERROR = "protocol_error"
    INCOMPLETE_RESPONSE = "incomplete_response"
    AUTH_EXPIRED = "auth_expired"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SERVER_ERROR = "server_error"
    MALFORMED_PAYLOAD = "malformed_payload"


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


def kind_for_status(status: int) -> ErrorKind:
    """Map a non-2xx HTTP status onto the taxonomy."""

    if status == 401:
        return ErrorKind.AUTH_EXPIRED
    if status == 403:
        return ErrorKind.FORBIDDEN
    if status == 404:
        return ErrorKind.NOT_FOUND
    if 400 <= status < 500:
        return ErrorKind.VALIDATION
    return ErrorKind.SERVER_ERROR


def generic_http_message(status: int) -> str:
    return f"HTTP error! status: {status}"


def extract_error_message(data: object, text: str | None, status: int) -> str:
    """Pick the most human-readable message out of an error body.

    Priority: ``error``, ``message``, ``errors`` (joined list or flattened map of
    lists), a bare string payload, the raw body text when it was not JSON, and
    finally a generated ``HTTP error! status: N`` message.
    """

    if isinstance(data, Mapping):
        payload = cast(Mapping[str, object], data)
        for key in ("error", "message"):
            value = payload.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value)
        errors = payload.get("errors")
        if errors:
            joined = _join_errors(errors)
            if joined:
                return joined
    elif isinstance(data, str) and data.strip():
        return data

    if data is None and text and text.strip():
        return text.strip()[:_RAW_TEXT_LIMIT]

    return generic_http_message(status)


def field_errors_from(details: object) -> dict[str, list[str]]:
    """Return ``{field: [messages]}`` from a map-shaped ``errors`` payload."""

    if not isinstance(details, Mapping):
        return {}
    errors = cast(Mapping[str, object], details).get("errors")
    if not isinstance(errors, Mapping):
        return {}
    result: dict[str, list[str]] = {}
    for name, messages in cast(Mapping[str, object], errors).items():
        if isinstance(messages, list | tuple):
            result[str(name)] = [str(message) for message in cast(list[object], messages)]
        elif messages is not None:
            result[str(name)] = [str(messages)]
    return result


def _join_errors(errors: object) -> str:
    if isinstance(errors, list | tuple):
        return ", ".join(str(item) for item in cast(list[object], errors))
    if isinstance(errors, Mapping):
        flattened: list[str] = []
        for messages in cast(Mapping[str, object], errors).values():
            if isinstance(messages, list | tuple):
                flattened.extend(str(item) for item in cast(list[object], messages))
            else:
                flattened.append(str(messages))
        return ", ".join(flattened)
    return str(errors)


__all__ = [
    "FORBIDDEN_MESSAGE",
    "INCOMPLETE_RESPONSE_MESSAGE",
    "MALFORMED_PAYLOAD_MESSAGE",
    "NETWORK_ERROR_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "UNAUTHORIZED_MESSAGE",
    "ErrorKind",
    "extract_error_message",
    "field_errors_from",
    "generic_http_message",
    "is_success_status",
    "kind_for_status",
]
