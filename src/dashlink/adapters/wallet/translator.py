"""Translate withdrawal payloads into canonical records."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .models import WithdrawalRecord
from .schema import WithdrawalListResponse, WithdrawalRequestPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)


def _to_record(validated: WithdrawalRequestPayload) -> WithdrawalRecord:
    return WithdrawalRecord(
        id=validated.id,
        amount=validated.amount,
        bank_name=validated.bank_name,
        created_at=validated.created_at,
        bank_account_number=validated.bank_account_number,
        bank_holder_name=validated.bank_holder_name,
        status=validated.status,
    )


def parse_withdrawal(payload: object) -> WithdrawalRecord:
    return _to_record(WithdrawalRequestPayload.model_validate(payload))


def _parse_each(items: Iterable[object]) -> list[WithdrawalRecord]:
    records: list[WithdrawalRecord] = []
    for index, item in enumerate(items):
        try:
            records.append(parse_withdrawal(item))
        except ValidationError as exc:
            log.warning(
                "Skipping unreadable withdrawal record at index %d: %d error(s)",
                index,
                exc.error_count(),
            )
    return records


def decode_withdrawal_list(payload: object) -> list[WithdrawalRecord]:
    """Accept a bare list or a ``{"data": [...]}`` envelope.

    Records that fail validation are skipped, so one bad entry does not hide the rest.
    """

    if isinstance(payload, list):
        return _parse_each(payload)
    if isinstance(payload, Mapping):
        envelope = WithdrawalListResponse.model_validate(payload)
        return _parse_each(envelope.data)
    raise TypeError(f"Unexpected withdrawal list payload: {type(payload).__name__}")
