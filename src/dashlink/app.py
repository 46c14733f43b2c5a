"""Application wiring entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from dashlink.adapters.executor import RequestExecutor
from dashlink.adapters.session import FileKeyValueStore, SessionStoreAdapter
from dashlink.adapters.wallet import WalletClient, WithdrawalForm
from dashlink.config import get_api_config
from dashlink.domain.reconciliation import Reconciler
from dashlink.domain.requests import RequestDescriptor

if TYPE_CHECKING:
    from dashlink.adapters.executor import ClientFactory
    from dashlink.config import ApiConfig
    from dashlink.domain.mutations import Resolution
    from dashlink.domain.outcome import Outcome
    from dashlink.domain.ports.session import Navigator, SessionStore

log = getLogger(__name__)


def build_executor(
    *,
    config: ApiConfig | None = None,
    session: SessionStore | None = None,
    navigator: Navigator | None = None,
    client_factory: ClientFactory | None = None,
) -> RequestExecutor:
    effective_config = config or get_api_config()
    effective_session = session or SessionStoreAdapter(FileKeyValueStore())
    return RequestExecutor(
        effective_config,
        effective_session,
        navigator=navigator,
        client_factory=client_factory,
    )


def build_wallet_client(executor: RequestExecutor) -> WalletClient:
    reconciler = Reconciler(executor, config=executor.config.reconciliation)
    return WalletClient(executor, reconciler)


async def send_request(
    executor: RequestExecutor,
    method: str,
    path: str,
    *,
    payload: object | None = None,
) -> Outcome[object]:
    """Issue one unhinted request, JSON-encoding ``payload`` when given."""

    if payload is None:
        descriptor = RequestDescriptor(method=method, path=path)
    else:
        descriptor = RequestDescriptor.json(method, path, payload)
    return await executor.execute(descriptor)


async def withdraw(
    executor: RequestExecutor,
    form: WithdrawalForm,
    *,
    deadline: float | None = None,
) -> Resolution:
    client = build_wallet_client(executor)
    resolution = await client.submit_withdrawal(form, deadline=deadline)
    log.info("Withdrawal of %s finished: %s", form.amount, resolution.status)
    return resolution


__all__ = ["build_executor", "build_wallet_client", "send_request", "withdraw"]
