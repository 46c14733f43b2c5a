"""Port for issuing requests through the executor."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dashlink.domain.outcome import Outcome
    from dashlink.domain.requests import RequestDescriptor

type Decoder[T] = Callable[[object], T]


class RequestExecutorPort(Protocol):
    async def execute[T](
        self,
        descriptor: RequestDescriptor,
        *,
        decode: Decoder[T] | None = None,
    ) -> Outcome[T]: ...


__all__ = ["Decoder", "RequestExecutorPort"]
