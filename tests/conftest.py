from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from dashlink.adapters.executor import RequestExecutor
from dashlink.adapters.http_resilience import ResilienceConfig, ResilientClient
from dashlink.adapters.session import MemoryKeyValueStore, SessionStoreAdapter
from dashlink.config import ApiConfig, ReconciliationConfig

if TYPE_CHECKING:
    from collections.abc import Callable

    from aiolimiter import AsyncLimiter

    from dashlink.adapters.executor import ClientFactory
    from dashlink.domain.ports.session import Navigator, SessionStore

BASE_URL = "https://api.example.test"
SUBMITTED_AT = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)

type Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> ClientFactory:
    def factory(
        resilience: ResilienceConfig,
        *,
        limiter: AsyncLimiter | None = None,
    ) -> ResilientClient:
        return ResilientClient(
            resilience, transport=httpx.MockTransport(handler), limiter=limiter
        )

    return factory


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(
        resilience=ResilienceConfig(name="test-api", base_url=BASE_URL),
        reconciliation=ReconciliationConfig(backoff_seconds=0.0, naive_timezone=UTC),
        redirect_delay_seconds=0.0,
    )


@pytest.fixture
def key_value_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore(
        {"authToken": "token-123", "refreshToken": "refresh-456", "user": '{"id": 1}'}
    )


@pytest.fixture
def session_store(key_value_store: MemoryKeyValueStore) -> SessionStoreAdapter:
    return SessionStoreAdapter(key_value_store)


@pytest.fixture
def make_executor(
    api_config: ApiConfig,
    session_store: SessionStoreAdapter,
) -> Callable[..., RequestExecutor]:
    def _make(
        handler: Handler,
        *,
        session: SessionStore | None = None,
        navigator: Navigator | None = None,
        config: ApiConfig | None = None,
    ) -> RequestExecutor:
        return RequestExecutor(
            config or api_config,
            session or session_store,
            navigator=navigator,
            client_factory=make_client_factory(handler),
            clock=lambda: SUBMITTED_AT,
        )

    return _make


@pytest.fixture
def submitted_at() -> datetime:
    return SUBMITTED_AT
