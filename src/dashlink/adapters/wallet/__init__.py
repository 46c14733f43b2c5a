"""Public interface for the withdrawal adapter."""

from __future__ import annotations

from .client import MY_WITHDRAWALS_PATH, WITHDRAWALS_PATH, WalletClient, withdrawal_hint
from .models import WithdrawalForm, WithdrawalRecord
from .schema import WithdrawalListResponse, WithdrawalRequestPayload
from .translator import decode_withdrawal_list, parse_withdrawal

__all__ = [
    "MY_WITHDRAWALS_PATH",
    "WITHDRAWALS_PATH",
    "WalletClient",
    "WithdrawalForm",
    "WithdrawalListResponse",
    "WithdrawalRecord",
    "WithdrawalRequestPayload",
    "decode_withdrawal_list",
    "parse_withdrawal",
    "withdrawal_hint",
]
