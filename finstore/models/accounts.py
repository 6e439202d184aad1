"""ORM models for financial accounts and their daily balances and valuations."""
from __future__ import annotations

import datetime as dt
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finstore.domain.enums import (
    AccountClassification,
    AccountType,
    BalanceStrategy,
    SyncStatus,
)
from finstore.domain.overrides import ACCOUNT_CATEGORY_FALLBACK

from .base import ID_TYPE, JSON_DICT, MONEY, Base, TimestampMixin, enum_column

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .connections import AccountConnection
    from .investments import Holding, InvestmentTransaction
    from .transactions import Transaction
    from .users import User


class Account(TimestampMixin, Base):
    """Bank, brokerage, property or debt account.

    Manual accounts belong to a user, aggregated accounts to a connection.
    Overridable fields come in ``<field>_user`` / ``<field>_provider`` pairs
    with the effective ``<field>`` written on every flush.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint(
            "account_connection_id", "plaid_account_id", name="uq_accounts_connection_plaid"
        ),
        UniqueConstraint(
            "account_connection_id", "teller_account_id", name="uq_accounts_connection_teller"
        ),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    account_connection_id: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("account_connections.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[AccountType] = mapped_column(enum_column(AccountType), nullable=False)
    classification: Mapped[AccountClassification | None] = mapped_column(
        enum_column(AccountClassification)
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mask: Mapped[str | None] = mapped_column(String(8))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sync_status: Mapped[SyncStatus] = mapped_column(
        enum_column(SyncStatus), nullable=False, default=SyncStatus.IDLE
    )
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    start_date: Mapped[date | None] = mapped_column(Date)

    category_user: Mapped[str | None] = mapped_column(String(64))
    category_provider: Mapped[str | None] = mapped_column(String(64))
    category: Mapped[str] = mapped_column(
        String(64), nullable=False, default=ACCOUNT_CATEGORY_FALLBACK
    )
    subcategory_user: Mapped[str | None] = mapped_column(String(64))
    subcategory_provider: Mapped[str | None] = mapped_column(String(64))
    subcategory: Mapped[str] = mapped_column(
        String(64), nullable=False, default=ACCOUNT_CATEGORY_FALLBACK
    )

    current_balance_user: Mapped[Decimal | None] = mapped_column(MONEY)
    current_balance_provider: Mapped[Decimal | None] = mapped_column(MONEY)
    current_balance_strategy: Mapped[BalanceStrategy] = mapped_column(
        enum_column(BalanceStrategy), nullable=False, default=BalanceStrategy.CURRENT
    )
    current_balance: Mapped[Decimal | None] = mapped_column(MONEY)
    available_balance_user: Mapped[Decimal | None] = mapped_column(MONEY)
    available_balance_provider: Mapped[Decimal | None] = mapped_column(MONEY)
    available_balance_strategy: Mapped[BalanceStrategy] = mapped_column(
        enum_column(BalanceStrategy), nullable=False, default=BalanceStrategy.AVAILABLE
    )
    available_balance: Mapped[Decimal | None] = mapped_column(MONEY)

    loan_user: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    loan_provider: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    loan: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    credit_user: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    credit_provider: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    credit: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)

    plaid_account_id: Mapped[str | None] = mapped_column(String(255))
    plaid_type: Mapped[str | None] = mapped_column(String(64))
    plaid_subtype: Mapped[str | None] = mapped_column(String(64))
    teller_account_id: Mapped[str | None] = mapped_column(String(255))
    teller_type: Mapped[str | None] = mapped_column(String(64))
    teller_subtype: Mapped[str | None] = mapped_column(String(64))

    connection: Mapped["AccountConnection | None"] = relationship(back_populates="accounts")
    user: Mapped["User | None"] = relationship(back_populates="accounts")
    balances: Mapped[list["AccountBalance"]] = relationship(
        back_populates="account", cascade="all"
    )
    valuations: Mapped[list["Valuation"]] = relationship(
        back_populates="account", cascade="all"
    )
    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="account", cascade="all"
    )
    holdings: Mapped[list["Holding"]] = relationship(back_populates="account", cascade="all")
    investment_transactions: Mapped[list["InvestmentTransaction"]] = relationship(
        back_populates="account", cascade="all"
    )


class AccountBalance(TimestampMixin, Base):
    """Daily balance snapshot, one row per account and date."""

    __tablename__ = "account_balances"

    account_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True
    )
    date: Mapped[dt.date] = mapped_column(Date, primary_key=True)
    balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    account: Mapped[Account] = relationship(back_populates="balances")


class Valuation(TimestampMixin, Base):
    """Manual or periodic value record for an account."""

    __tablename__ = "valuations"
    __table_args__ = (
        UniqueConstraint("account_id", "source", "date", name="uq_valuations_account_source_date"),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    source: Mapped[str] = mapped_column(String(32), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    value: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    account: Mapped[Account] = relationship(back_populates="valuations")
