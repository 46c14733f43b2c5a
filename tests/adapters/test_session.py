from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable, Mapping  # noqa: TC003
from pathlib import Path  # noqa: TC003

import pytest

from dashlink.adapters.auth import SessionGuard
from dashlink.adapters.session import (
    FileKeyValueStore,
    MemoryKeyValueStore,
    SessionKeys,
    SessionStoreAdapter,
)
from dashlink.domain.ports.session import KeyValueStore, SessionStore


class _CountingStore(MemoryKeyValueStore):
    def __init__(self) -> None:
        super().__init__({"authToken": "abc", "refreshToken": "def", "user": "{}"})
        self.remove_calls: list[tuple[str, ...]] = []
        self.set_calls: list[tuple[dict[str, str], tuple[str, ...]]] = []

    def set(self, items: Mapping[str, str], *, discard: Iterable[str] = ()) -> None:
        self.set_calls.append((dict(items), tuple(discard)))
        super().set(items, discard=discard)

    def remove(self, *keys: str) -> None:
        self.remove_calls.append(keys)
        super().remove(*keys)


class _Navigator:
    def __init__(self, path: str) -> None:
        self.path = path
        self.visits: list[str] = []

    def current_path(self) -> str:
        return self.path

    def navigate(self, path: str) -> None:
        self.visits.append(path)


def test_adapters_satisfy_ports(tmp_path: Path) -> None:
    assert isinstance(MemoryKeyValueStore(), KeyValueStore)
    assert isinstance(FileKeyValueStore(tmp_path / "s.json"), KeyValueStore)
    assert isinstance(SessionStoreAdapter(MemoryKeyValueStore()), SessionStore)


def test_clear_removes_every_key_in_one_call() -> None:
    backend = _CountingStore()
    session = SessionStoreAdapter(backend)

    session.clear()

    assert backend.remove_calls == [SessionKeys().all()]
    assert session.get() is None
    assert backend.get("user") is None


def test_clear_is_idempotent() -> None:
    session = SessionStoreAdapter(MemoryKeyValueStore())

    session.clear()
    session.clear()

    assert session.get() is None


def test_store_then_get_roundtrip_and_blank_tokens() -> None:
    backend = MemoryKeyValueStore()
    session = SessionStoreAdapter(backend)

    session.store(" tok ", refresh_token="ref", user={"id": 3})

    assert session.get() == "tok"
    assert backend.get("refreshToken") == "ref"
    assert json.loads(backend.get("user") or "") == {"id": 3}
    with pytest.raises(ValueError, match="blank"):
        session.store("  ")


def test_store_drops_keys_of_previous_session_in_one_write(tmp_path: Path) -> None:
    backend = _CountingStore()
    session = SessionStoreAdapter(backend)

    session.store("fresh")

    assert backend.set_calls == [({"authToken": "fresh"}, ("refreshToken", "user"))]
    assert session.get() == "fresh"
    assert backend.get("refreshToken") is None
    assert backend.get("user") is None

    path = tmp_path / "session.json"
    file_session = SessionStoreAdapter(FileKeyValueStore(path))
    file_session.store("old", refresh_token="ref", user={"id": 1})
    file_session.store("new", user={"id": 2})

    assert json.loads(path.read_text()) == {"authToken": "new", "user": '{"id": 2}'}


def test_file_store_persists_and_clears(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "session.json"
    session = SessionStoreAdapter(FileKeyValueStore(path))

    session.store("tok", refresh_token="ref")

    assert json.loads(path.read_text()) == {"authToken": "tok", "refreshToken": "ref"}
    assert SessionStoreAdapter(FileKeyValueStore(path)).get() == "tok"

    session.clear()

    assert json.loads(path.read_text()) == {}
    assert list(path.parent.glob(".session-*")) == []


def test_file_store_ignores_unreadable_document(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json")

    store = FileKeyValueStore(path)

    assert store.get("authToken") is None
    store.set({"authToken": "fresh"})
    assert store.get("authToken") == "fresh"


def test_file_store_defaults_to_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DASHLINK_DATA_DIR", str(tmp_path / "data"))

    store = FileKeyValueStore()

    assert store.path == (tmp_path / "data" / "session.json").resolve()


def test_guard_redirects_immediately_without_running_loop() -> None:
    navigator = _Navigator("/settings")
    guard = SessionGuard(SessionStoreAdapter(MemoryKeyValueStore()), navigator=navigator)

    guard.on_auth_expired()
    guard.on_auth_expired()

    assert navigator.visits == ["/login"]


def test_guard_reset_allows_next_redirect() -> None:
    navigator = _Navigator("/settings")
    guard = SessionGuard(
        SessionStoreAdapter(MemoryKeyValueStore()),
        navigator=navigator,
        redirect_delay_seconds=0.0,
    )

    async def scenario() -> None:
        guard.on_auth_expired()
        await asyncio.sleep(0.01)
        guard.reset()
        navigator.path = "/settings"
        guard.on_auth_expired()
        await asyncio.sleep(0.01)

    asyncio.run(scenario())

    assert navigator.visits == ["/login", "/login"]


def test_guard_without_navigator_only_clears() -> None:
    backend = MemoryKeyValueStore({"authToken": "abc"})
    guard = SessionGuard(SessionStoreAdapter(backend))

    guard.on_auth_expired()

    assert backend.get("authToken") is None
    assert not guard.redirect_scheduled
