"""Canonical withdrawal types, independent of the API's field spelling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class WithdrawalForm:
    amount: float
    bank_name: str
    bank_account_number: str
    bank_holder_name: str

    def to_payload(self) -> dict[str, object]:
        return {
            "amount": self.amount,
            "bankName": self.bank_name,
            "bankAccountNumber": self.bank_account_number,
            "bankHolderName": self.bank_holder_name,
        }


@dataclass(frozen=True, slots=True)
class WithdrawalRecord:
    id: str
    amount: float
    bank_name: str
    created_at: datetime
    bank_account_number: str | None = None
    bank_holder_name: str | None = None
    status: str | None = None
