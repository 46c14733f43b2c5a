"""Classify a raw response body before any status handling.

The truncation rule is a heuristic: well-formed JSON documents end on a closing brace
or bracket, so a 2xx body that fails to parse and does not end on one is presumed to
have been cut off mid-stream. Plain-text confirmations ("Saved.", "Done!") are told
apart by their sentence punctuation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, Literal

from .errors import is_success_status

_SENTENCE_ENDINGS: Final[tuple[str, ...]] = (".", "!", "?")
_JSON_CLOSERS: Final[tuple[str, ...]] = ("}", "]")
_JSON_OPENERS: Final[tuple[str, ...]] = ("{", "[")


class IntegrityStatus(StrEnum):
    WELL_FORMED_JSON = "well_formed_json"
    PLAIN_TEXT_SUCCESS = "plain_text_success"
    TRUNCATED = "truncated"
    ERROR_TEXT = "error_text"
    MALFORMED = "malformed"


@dataclass(slots=True, frozen=True)
class WellFormedJson:
    value: object
    status: Literal[IntegrityStatus.WELL_FORMED_JSON] = IntegrityStatus.WELL_FORMED_JSON


@dataclass(slots=True, frozen=True)
class PlainTextSuccess:
    text: str
    status: Literal[IntegrityStatus.PLAIN_TEXT_SUCCESS] = IntegrityStatus.PLAIN_TEXT_SUCCESS


@dataclass(slots=True, frozen=True)
class Truncated:
    text: str
    status: Literal[IntegrityStatus.TRUNCATED] = IntegrityStatus.TRUNCATED


@dataclass(slots=True, frozen=True)
class ErrorText:
    """Unparseable body on a non-2xx status; kept verbatim as the error message."""

    text: str
    status: Literal[IntegrityStatus.ERROR_TEXT] = IntegrityStatus.ERROR_TEXT


@dataclass(slots=True, frozen=True)
class Malformed:
    """Unparseable 2xx body that is neither a confirmation sentence nor cut off."""

    text: str
    status: Literal[IntegrityStatus.MALFORMED] = IntegrityStatus.MALFORMED


type BodyIntegrity = WellFormedJson | PlainTextSuccess | Truncated | ErrorText | Malformed


def _reject_constant(name: str) -> object:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_strict_json(body: str) -> object:
    """Parse ``body`` as JSON, rejecting ``NaN``/``Infinity`` extensions."""

    return json.loads(body, parse_constant=_reject_constant)


def inspect_body(status: int, body: str) -> BodyIntegrity:
    success = is_success_status(status)
    trimmed = body.strip()

    if success and not trimmed:
        return WellFormedJson(None)

    try:
        return WellFormedJson(parse_strict_json(body))
    except (ValueError, RecursionError):
        # nesting too deep for the decoder is judged by the same text rules
        pass

    if not success:
        return ErrorText(body)

    if trimmed.endswith(_SENTENCE_ENDINGS) and not any(
        opener in trimmed for opener in _JSON_OPENERS
    ):
        return PlainTextSuccess(trimmed)
    if not trimmed.endswith(_JSON_CLOSERS):
        return Truncated(body)
    return Malformed(body)


__all__ = [
    "BodyIntegrity",
    "ErrorText",
    "IntegrityStatus",
    "Malformed",
    "PlainTextSuccess",
    "Truncated",
    "WellFormedJson",
    "inspect_body",
    "parse_strict_json",
]
