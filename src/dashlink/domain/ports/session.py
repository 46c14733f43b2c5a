"""Ports for persisted credentials and the login surface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@runtime_checkable
class KeyValueStore(Protocol):
    """Opaque storage primitive; multi-key writes and removals are atomic.

    ``set`` writes ``items`` and drops the ``discard`` keys as one change.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, items: Mapping[str, str], *, discard: Iterable[str] = ()) -> None: ...

    def remove(self, *keys: str) -> None: ...


@runtime_checkable
class SessionStore(Protocol):
    """Read access to the current auth token plus atomic invalidation."""

    def get(self) -> str | None: ...

    def clear(self) -> None: ...


@runtime_checkable
class Navigator(Protocol):
    """Whatever surface shows the login screen (browser shell, CLI, tests)."""

    def current_path(self) -> str: ...

    def navigate(self, path: str) -> None: ...


__all__ = ["KeyValueStore", "Navigator", "SessionStore"]
