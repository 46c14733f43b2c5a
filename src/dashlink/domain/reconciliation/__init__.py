"""Reconciliation of ambiguous writes against server state.

Flow:
1) an ``Ambiguous`` outcome hands over its stamped ``MutationHint``
2) a ``ReconciliationQuery`` fixes the time window and comparison predicate
3) the ``Reconciler`` waits a fixed backoff and reads the collection once
4) the first matching record confirms the write; anything else stays unconfirmed
"""

from __future__ import annotations

from .contracts import Confirmed, MatchResult, MatchStatus, Unconfirmed
from .engine import Reconciler, extract_records
from .matching import ReconciliationQuery, field_value, fields_predicate, values_equal

__all__ = [
    "Confirmed",
    "MatchResult",
    "MatchStatus",
    "ReconciliationQuery",
    "Reconciler",
    "Unconfirmed",
    "extract_records",
    "field_value",
    "fields_predicate",
    "values_equal",
]
