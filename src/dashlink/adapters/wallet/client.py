"""Withdrawal endpoints of the dashboard API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from dashlink.domain.mutations import submit_mutation
from dashlink.domain.requests import MutationHint, RequestDescriptor

from .translator import decode_withdrawal_list, parse_withdrawal

if TYPE_CHECKING:
    from dashlink.domain.mutations import Resolution
    from dashlink.domain.outcome import Outcome
    from dashlink.domain.ports.requests import RequestExecutorPort
    from dashlink.domain.reconciliation import Reconciler

    from .models import WithdrawalForm, WithdrawalRecord

log = getLogger(__name__)

WITHDRAWALS_PATH: Final[str] = "/withdrawal-requests"
MY_WITHDRAWALS_PATH: Final[str] = "/withdrawal-requests/my-requests"
WITHDRAWAL_RESOURCE: Final[str] = "withdrawal"


def withdrawal_hint(form: WithdrawalForm) -> MutationHint:
    return MutationHint(
        resource=WITHDRAWAL_RESOURCE,
        fields={"amount": form.amount, "bank_name": form.bank_name},
        timestamp_field="created_at",
    )


class WalletClient:
    """Withdrawal requests for the signed-in parent."""

    def __init__(self, executor: RequestExecutorPort, reconciler: Reconciler) -> None:
        self._executor = executor
        self._reconciler = reconciler

    def withdrawal_descriptor(self, form: WithdrawalForm) -> RequestDescriptor:
        return RequestDescriptor.json(
            "POST",
            WITHDRAWALS_PATH,
            form.to_payload(),
            hint=withdrawal_hint(form),
        )

    def history_descriptor(self) -> RequestDescriptor:
        return RequestDescriptor.get(MY_WITHDRAWALS_PATH)

    async def request_withdrawal(self, form: WithdrawalForm) -> Outcome[object]:
        return await self._executor.execute(self.withdrawal_descriptor(form))

    async def list_my_withdrawals(self) -> Outcome[list[WithdrawalRecord]]:
        return await self._executor.execute(
            self.history_descriptor(), decode=decode_withdrawal_list
        )

    async def submit_withdrawal(
        self,
        form: WithdrawalForm,
        *,
        deadline: float | None = None,
    ) -> Resolution:
        """Request a withdrawal; an ambiguous answer is checked against the history."""

        log.info("Submitting withdrawal of %s to %s", form.amount, form.bank_name)
        return await submit_mutation(
            self._executor,
            self._reconciler,
            self.withdrawal_descriptor(form),
            self.history_descriptor(),
            decode=_decode_created,
            collection_decode=decode_withdrawal_list,
            deadline=deadline,
        )


def _decode_created(payload: object) -> object:
    # creation answers are either the new record or a bare acknowledgement
    if isinstance(payload, dict) and any(
        key in payload for key in ("createdDate", "CreatedDate", "createdAt", "CreatedAt")
    ):
        return parse_withdrawal(payload)
    return payload


__all__ = [
    "MY_WITHDRAWALS_PATH",
    "WITHDRAWALS_PATH",
    "WITHDRAWAL_RESOURCE",
    "WalletClient",
    "withdrawal_hint",
]
