"""Resolve ambiguous writes by reading the affected collection back.

The write is never re-submitted: without an idempotency key a retry could duplicate
it. Instead the engine waits for the server to settle, reads the collection once and
looks for the record the write would have produced.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from logging import getLogger
from typing import TYPE_CHECKING, cast

from dashlink.config.reconciliation import ReconciliationConfig
from dashlink.domain.outcome import Success

from .contracts import Confirmed, MatchResult, Unconfirmed
from .matching import ReconciliationQuery

if TYPE_CHECKING:
    from dashlink.domain.ports.requests import Decoder, RequestExecutorPort
    from dashlink.domain.requests import MutationHint, RequestDescriptor

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]

_COLLECTION_KEYS = ("data", "items")


def extract_records(payload: object) -> list[object] | None:
    """Return the records of a collection payload, or ``None`` if it has none."""

    if isinstance(payload, list | tuple):
        return list(cast(list[object], payload))
    if isinstance(payload, Mapping):
        mapping = cast(Mapping[str, object], payload)
        for key in _COLLECTION_KEYS:
            nested = mapping.get(key)
            if isinstance(nested, list | tuple):
                return list(cast(list[object], nested))
    return None


class Reconciler:
    """Turns an ``Ambiguous`` outcome into ``Confirmed`` or ``Unconfirmed``."""

    def __init__(
        self,
        executor: RequestExecutorPort,
        *,
        config: ReconciliationConfig | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._executor = executor
        self._config = config or ReconciliationConfig()
        self._sleep = sleep

    @property
    def config(self) -> ReconciliationConfig:
        return self._config

    async def reconcile(
        self,
        hint: MutationHint,
        collection: RequestDescriptor,
        *,
        decode: Decoder[object] | None = None,
    ) -> MatchResult:
        if collection.is_mutating:
            raise ValueError(f"Reconciliation must read, got {collection.method} {collection.path}")
        query = ReconciliationQuery.for_hint(hint, collection, config=self._config)

        await self._sleep(self._config.backoff_seconds)

        outcome = await self._executor.execute(query.collection, decode=decode)
        if not isinstance(outcome, Success):
            log.info(
                "Reconciliation read for %s failed (%s); leaving outcome unconfirmed",
                hint.resource,
                outcome.status,
            )
            return Unconfirmed(reason=f"Could not read {collection.path} to verify the request")

        records = extract_records(outcome.data)
        if records is None:
            log.warning("Reconciliation read for %s returned no collection", hint.resource)
            return Unconfirmed(reason=f"{collection.path} did not return a collection")

        record = query.first_match(records)
        if record is None:
            log.info(
                "No %s record matched within [%s, %s] among %d candidates",
                hint.resource,
                query.window.start.isoformat(),
                query.window.end.isoformat(),
                len(records),
            )
            return Unconfirmed(reason=f"No matching {hint.resource} record found")

        log.info("Confirmed ambiguous %s write against server state", hint.resource)
        return Confirmed(record=record)


__all__ = ["Reconciler", "Sleep", "extract_records"]
