"""Time windows used to decide whether a server record belongs to a submission."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import tzinfo


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Time window values must include timezone information")
    return value.astimezone(UTC)


def parse_timestamp(value: object, *, naive_tz: tzinfo | None = None) -> datetime | None:
    """Read a record timestamp and return it in UTC.

    Accepts aware or naive ``datetime`` objects and ISO-8601 strings (a trailing
    ``Z`` is allowed). Values without an offset are read in ``naive_tz``, or in the
    local zone when it is ``None``. Anything unreadable yields ``None``.
    """

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and value.strip():
        normalized = value.strip()
        if normalized.endswith(("Z", "z")):
            normalized = normalized[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(normalized)
        except ValueError:
            return None
    else:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=naive_tz) if naive_tz is not None else moment.astimezone()
    return moment.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Closed interval ``[start, end]`` in UTC."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        start = _ensure_aware(self.start)
        end = _ensure_aware(self.end)
        if start > end:
            raise ValueError("Time window start must be before end")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def after(
        cls,
        anchor: datetime,
        *,
        span: timedelta,
        lead: timedelta = timedelta(0),
    ) -> TimeWindow:
        """Window from ``anchor - lead`` up to and including ``anchor + span``."""

        if span < timedelta(0) or lead < timedelta(0):
            raise ValueError("Time window durations must be non-negative")
        anchor = _ensure_aware(anchor)
        return cls(start=anchor - lead, end=anchor + span)

    def contains(self, moment: datetime) -> bool:
        return self.start <= _ensure_aware(moment) <= self.end


__all__ = ["Clock", "TimeWindow", "parse_timestamp", "utcnow"]
