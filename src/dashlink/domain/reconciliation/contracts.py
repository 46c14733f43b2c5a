"""Results of reconciling an ambiguous write against server state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal


class MatchStatus(StrEnum):
    """Whether the server shows the effect of the write."""

    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"


@dataclass(slots=True, frozen=True, kw_only=True)
class Confirmed:
    """A record matching the submitted write was found."""

    record: object
    status: Literal[MatchStatus.CONFIRMED] = MatchStatus.CONFIRMED


@dataclass(slots=True, frozen=True, kw_only=True)
class Unconfirmed:
    """No evidence either way; callers must tell the user to check their history."""

    reason: str
    status: Literal[MatchStatus.UNCONFIRMED] = MatchStatus.UNCONFIRMED


type MatchResult = Confirmed | Unconfirmed


__all__ = ["Confirmed", "MatchResult", "MatchStatus", "Unconfirmed"]
