"""Pydantic models describing withdrawal payloads.

The backend serialises the same records in camelCase on some routes and PascalCase
on others; every field accepts both spellings.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)


def _either(name: str) -> AliasChoices:
    return AliasChoices(name, name[0].upper() + name[1:])


class WalletBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Wallet %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class WithdrawalRequestPayload(WalletBaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "Id", "withdrawalRequestId"))
    amount: float = Field(validation_alias=_either("amount"))
    bank_name: str = Field(validation_alias=_either("bankName"))
    bank_account_number: str | None = Field(
        default=None, validation_alias=_either("bankAccountNumber")
    )
    bank_holder_name: str | None = Field(default=None, validation_alias=_either("bankHolderName"))
    status: str | None = Field(default=None, validation_alias=_either("status"))
    created_at: datetime = Field(
        validation_alias=AliasChoices("createdDate", "CreatedDate", "createdAt", "CreatedAt")
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("created_at")
    @classmethod
    def _normalize_offset(cls, value: datetime) -> datetime:
        # offset-less values stay naive; matching decides which zone they belong to
        if value.tzinfo is None:
            return value
        return value.astimezone(UTC)


class WithdrawalListResponse(WalletBaseModel):
    # items are validated one by one so a single bad record can be skipped
    data: list[object] = Field(validation_alias=_either("data"))
