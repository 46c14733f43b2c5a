"""Credential storage: key-value backends and the session facade over them."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, cast

from dashlink.common.storage import get_session_path

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from dashlink.domain.ports.session import KeyValueStore, SessionStore

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionKeys:
    auth_token: str = "authToken"
    refresh_token: str = "refreshToken"
    user: str = "user"

    def all(self) -> tuple[str, str, str]:
        return (self.auth_token, self.refresh_token, self.user)


class MemoryKeyValueStore:
    """Process-local store; every operation holds one lock."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, items: Mapping[str, str], *, discard: Iterable[str] = ()) -> None:
        with self._lock:
            self._values.update(items)
            for key in discard:
                self._values.pop(key, None)

    def remove(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._values.pop(key, None)


class FileKeyValueStore:
    """JSON document on disk, replaced atomically on every write."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or get_session_path()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set(self, items: Mapping[str, str], *, discard: Iterable[str] = ()) -> None:
        with self._lock:
            values = self._read()
            values.update(items)
            for key in discard:
                values.pop(key, None)
            self._write(values)

    def remove(self, *keys: str) -> None:
        with self._lock:
            values = self._read()
            if not any(key in values for key in keys):
                return
            for key in keys:
                values.pop(key, None)
            self._write(values)

    def _read(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            log.warning("Ignoring unreadable session file at %s", self._path)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {
            str(key): value
            for key, value in cast(dict[str, object], payload).items()
            if isinstance(value, str)
        }

    def _write(self, values: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class SessionStoreAdapter:
    """Reads the auth token and invalidates the whole session in one store call."""

    def __init__(self, backend: KeyValueStore, *, keys: SessionKeys | None = None) -> None:
        self._backend = backend
        self._keys = keys or SessionKeys()

    def get(self) -> str | None:
        token = self._backend.get(self._keys.auth_token)
        if token is None:
            return None
        return token.strip() or None

    def clear(self) -> None:
        self._backend.remove(*self._keys.all())

    def store(
        self,
        token: str,
        *,
        refresh_token: str | None = None,
        user: Mapping[str, object] | None = None,
    ) -> None:
        """Persist the result of a login in one write.

        Keys of the previous session that this login does not set are dropped in
        the same write.
        """

        if not token.strip():
            raise ValueError("Refusing to store a blank auth token")
        items = {self._keys.auth_token: token.strip()}
        if refresh_token:
            items[self._keys.refresh_token] = refresh_token
        if user is not None:
            items[self._keys.user] = json.dumps(user)
        stale = [key for key in self._keys.all() if key not in items]
        self._backend.set(items, discard=stale)


if TYPE_CHECKING:
    _memory_check: KeyValueStore = MemoryKeyValueStore()
    _file_check: KeyValueStore = FileKeyValueStore()
    _session_check: SessionStore = SessionStoreAdapter(MemoryKeyValueStore())


__all__ = [
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "SessionKeys",
    "SessionStoreAdapter",
]
