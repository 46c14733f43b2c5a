"""Submit a hinted write and settle what the user should be told about it."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final, Literal

from .outcome import Failure, Success
from .reconciliation import Confirmed

if TYPE_CHECKING:
    from .outcome import Outcome
    from .ports.requests import Decoder, RequestExecutorPort
    from .reconciliation import Reconciler
    from .requests import MutationHint, RequestDescriptor

log = getLogger(__name__)

UNCLEAR_MESSAGE: Final[str] = (
    "Request status unclear. Please check your history to confirm whether the request "
    "was created."
)


class ResolutionStatus(StrEnum):
    COMPLETED = "completed"
    REJECTED = "rejected"
    UNCLEAR = "unclear"


@dataclass(slots=True, frozen=True, kw_only=True)
class Completed:
    data: object
    reconciled: bool = False
    status: Literal[ResolutionStatus.COMPLETED] = ResolutionStatus.COMPLETED


@dataclass(slots=True, frozen=True, kw_only=True)
class Rejected:
    failure: Failure
    status: Literal[ResolutionStatus.REJECTED] = ResolutionStatus.REJECTED


@dataclass(slots=True, frozen=True, kw_only=True)
class Unclear:
    hint: MutationHint
    reason: str
    message: str = UNCLEAR_MESSAGE
    status: Literal[ResolutionStatus.UNCLEAR] = ResolutionStatus.UNCLEAR


type Resolution = Completed | Rejected | Unclear


async def submit_mutation(
    executor: RequestExecutorPort,
    reconciler: Reconciler,
    descriptor: RequestDescriptor,
    collection: RequestDescriptor,
    *,
    decode: Decoder[object] | None = None,
    collection_decode: Decoder[object] | None = None,
    deadline: float | None = None,
) -> Resolution:
    """Execute ``descriptor``; if the answer is ambiguous, verify it via ``collection``.

    The verification read starts only after the write has returned. ``deadline``
    bounds the verification in seconds; running out of time leaves the result
    unclear, never successful.
    """

    if descriptor.hint is None:
        raise ValueError("submit_mutation requires a descriptor with a mutation hint")

    outcome: Outcome[object] = await executor.execute(descriptor, decode=decode)
    if isinstance(outcome, Success):
        return Completed(data=outcome.data)
    if isinstance(outcome, Failure):
        return Rejected(failure=outcome)

    try:
        async with asyncio.timeout(deadline):
            match = await reconciler.reconcile(outcome.hint, collection, decode=collection_decode)
    except TimeoutError:
        log.warning("Verification of %s write timed out after %ss", outcome.hint.resource, deadline)
        return Unclear(hint=outcome.hint, reason="Verification timed out")

    if isinstance(match, Confirmed):
        return Completed(data=match.record, reconciled=True)
    return Unclear(hint=outcome.hint, reason=match.reason)


__all__ = [
    "UNCLEAR_MESSAGE",
    "Completed",
    "Rejected",
    "Resolution",
    "ResolutionStatus",
    "Unclear",
    "submit_mutation",
]
