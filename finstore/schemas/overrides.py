"""Payloads the user-facing layer may write.

Only ``*_user`` override fields and balance strategies are accepted. Provider
fields and effective columns are rejected by ``extra="forbid"``.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finstore.domain.enums import BalanceStrategy


class OverridePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the payload, including explicit nulls."""

        return self.model_dump(exclude_unset=True)


def _strip(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AccountOverrides(OverridePayload):
    category_user: str | None = Field(None, max_length=64)
    subcategory_user: str | None = Field(None, max_length=64)
    current_balance_user: Decimal | None = None
    available_balance_user: Decimal | None = None
    current_balance_strategy: BalanceStrategy | None = None
    available_balance_strategy: BalanceStrategy | None = None
    loan_user: dict[str, Any] | None = None
    credit_user: dict[str, Any] | None = None

    @field_validator("category_user", "subcategory_user")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _strip(value)

    @field_validator("current_balance_strategy", "available_balance_strategy")
    @classmethod
    def strategy_not_null(cls, value: BalanceStrategy | None) -> BalanceStrategy:
        if value is None:
            raise ValueError("balance strategy cannot be cleared")
        return value


class TransactionOverrides(OverridePayload):
    category_user: str | None = Field(None, max_length=64)
    excluded: bool | None = None

    @field_validator("category_user")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _strip(value)


class HoldingOverrides(OverridePayload):
    cost_basis_user: Decimal | None = None
    excluded: bool | None = None


class UserOverrides(OverridePayload):
    first_name: str | None = Field(None, max_length=120)
    last_name: str | None = Field(None, max_length=120)
    name_user: str | None = Field(None, max_length=255)

    @field_validator("first_name", "last_name", "name_user")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _strip(value)
