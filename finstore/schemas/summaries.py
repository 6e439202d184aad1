"""Read models returned by the services."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, field_serializer

from finstore.domain.enums import AccountClassification, AccountType, Flow

CENTS = Decimal("0.01")


def format_money(value: Decimal) -> str:
    """Render an amount with two decimal places whatever scale it was loaded with."""

    return format(value.quantize(CENTS, rounding=ROUND_HALF_UP), "f")


class AccountSummary(BaseModel):
    """Effective values of an account for display."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: AccountType
    classification: AccountClassification | None
    category: str
    subcategory: str
    current_balance: Decimal | None = None
    available_balance: Decimal | None = None
    currency_code: str

    @field_serializer("current_balance", "available_balance")
    def serialize_balance(self, value: Decimal | None) -> str | None:
        return None if value is None else format_money(value)


class NetWorthSummary(BaseModel):
    assets: Decimal
    liabilities: Decimal
    net_worth: Decimal
    accounts: list[AccountSummary]

    @field_serializer("assets", "liabilities", "net_worth")
    def serialize_amount(self, value: Decimal) -> str:
        return format_money(value)


class TransactionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: int
    name: str
    amount: Decimal
    flow: Flow
    category: str
    match_id: int | None = None
