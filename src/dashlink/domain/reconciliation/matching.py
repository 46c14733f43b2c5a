"""Heuristic matching of server records against a submitted write.

A record matches when its creation timestamp falls inside the query window and every
comparison field from the hint is equal. Numbers are compared with a small epsilon so
that float drift on the server does not hide a real match.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, cast

from dashlink.config.reconciliation import DEFAULT_AMOUNT_EPSILON, ReconciliationConfig
from dashlink.domain.time_windows import TimeWindow, parse_timestamp

if TYPE_CHECKING:
    from datetime import tzinfo

    from dashlink.domain.requests import MutationHint, RequestDescriptor

type RecordPredicate = Callable[[object], bool]

_MISSING = object()


def field_value(record: object, name: str) -> object:
    """Read ``name`` from a mapping or an attribute object."""

    if isinstance(record, Mapping):
        return cast(Mapping[str, object], record).get(name, _MISSING)
    return getattr(record, name, _MISSING)


def _is_number(value: object) -> bool:
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def values_equal(
    expected: object,
    actual: object,
    *,
    epsilon: float = DEFAULT_AMOUNT_EPSILON,
) -> bool:
    if _is_number(expected) and _is_number(actual):
        return abs(float(cast(float, expected)) - float(cast(float, actual))) < epsilon
    return expected == actual


def fields_predicate(
    fields: Mapping[str, object],
    *,
    epsilon: float = DEFAULT_AMOUNT_EPSILON,
) -> RecordPredicate:
    def predicate(record: object) -> bool:
        for name, expected in fields.items():
            actual = field_value(record, name)
            if actual is _MISSING or not values_equal(expected, actual, epsilon=epsilon):
                return False
        return True

    return predicate


@dataclass(frozen=True, slots=True)
class ReconciliationQuery:
    """One-shot lookup for the record an ambiguous write may have created."""

    window: TimeWindow
    predicate: RecordPredicate
    collection: RequestDescriptor
    timestamp_field: str
    naive_timezone: tzinfo | None = None

    @classmethod
    def for_hint(
        cls,
        hint: MutationHint,
        collection: RequestDescriptor,
        *,
        config: ReconciliationConfig | None = None,
    ) -> ReconciliationQuery:
        if hint.submitted_at is None:
            raise ValueError("Cannot reconcile a hint without a submission time")
        settings = config or ReconciliationConfig()
        window = TimeWindow.after(
            hint.submitted_at,
            span=timedelta(seconds=settings.window_seconds),
            lead=timedelta(seconds=settings.clock_skew_seconds),
        )
        return cls(
            window=window,
            predicate=fields_predicate(hint.fields, epsilon=settings.amount_epsilon),
            collection=collection,
            timestamp_field=hint.timestamp_field,
            naive_timezone=settings.naive_timezone,
        )

    def matches(self, record: object) -> bool:
        created_at = parse_timestamp(
            field_value(record, self.timestamp_field), naive_tz=self.naive_timezone
        )
        if created_at is None or not self.window.contains(created_at):
            return False
        return self.predicate(record)

    def first_match(self, records: Iterable[object]) -> object | None:
        for record in records:
            if self.matches(record):
                return record
        return None


__all__ = [
    "ReconciliationQuery",
    "RecordPredicate",
    "field_value",
    "fields_predicate",
    "values_equal",
]
