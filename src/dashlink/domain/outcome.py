"""Tri-state result of one request: success, failure, or ambiguous."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from .errors import ErrorKind, field_errors_from

if TYPE_CHECKING:
    from .requests import MutationHint


class OutcomeStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    AMBIGUOUS = "ambiguous"


@dataclass(slots=True, frozen=True, kw_only=True)
class Success[T]:
    """The server answered 2xx with a readable body."""

    data: T
    status: Literal[OutcomeStatus.SUCCESS] = OutcomeStatus.SUCCESS


@dataclass(slots=True, frozen=True, kw_only=True)
class Failure:
    """The request definitely did not produce the requested effect, or was rejected."""

    kind: ErrorKind
    message: str
    details: object | None = None
    status_code: int | None = None
    status: Literal[OutcomeStatus.FAILURE] = OutcomeStatus.FAILURE

    @property
    def field_errors(self) -> dict[str, list[str]]:
        if self.kind is not ErrorKind.VALIDATION:
            return {}
        return field_errors_from(self.details)


@dataclass(slots=True, frozen=True, kw_only=True)
class Ambiguous:
    """A hinted write whose effect on the server cannot be told from the response."""

    hint: MutationHint
    raw_body: str | None = None
    status: Literal[OutcomeStatus.AMBIGUOUS] = OutcomeStatus.AMBIGUOUS


type Outcome[T] = Success[T] | Failure | Ambiguous


__all__ = ["Ambiguous", "Failure", "Outcome", "OutcomeStatus", "Success"]
