"""Securities, daily pricing, holdings and investment activity."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finstore.domain.categories import INVESTMENT_CATEGORY_FALLBACK
from finstore.domain.enums import Flow

from .base import ID_TYPE, MONEY, Base, TimestampMixin, enum_column

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .accounts import Account

QUANTITY = Numeric(36, 18)


class Security(TimestampMixin, Base):
    """Tradable instrument, deduplicated by the provider's security id."""

    __tablename__ = "securities"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(255))
    symbol: Mapped[str | None] = mapped_column(String(32), index=True)
    cusip: Mapped[str | None] = mapped_column(String(9))
    isin: Mapped[str | None] = mapped_column(String(12))
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    shares_per_contract: Mapped[Decimal | None] = mapped_column(QUANTITY)
    plaid_security_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    plaid_type: Mapped[str | None] = mapped_column(String(64))
    plaid_is_cash_equivalent: Mapped[bool | None] = mapped_column(Boolean)

    pricing: Mapped[list["SecurityPricing"]] = relationship(
        back_populates="security", cascade="all"
    )
    holdings: Mapped[list["Holding"]] = relationship(back_populates="security", cascade="all")
    investment_transactions: Mapped[list["InvestmentTransaction"]] = relationship(
        back_populates="security", cascade="all"
    )


class SecurityPricing(TimestampMixin, Base):
    """Daily close price, one row per security and date."""

    __tablename__ = "security_prices"

    security_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("securities.id", ondelete="CASCADE"), primary_key=True
    )
    date: Mapped[dt.date] = mapped_column(Date, primary_key=True)
    price_close: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    source: Mapped[str | None] = mapped_column(String(32))

    security: Mapped[Security] = relationship(back_populates="pricing")


class Holding(TimestampMixin, Base):
    """Position snapshot for an account/security pair."""

    __tablename__ = "holdings"
    __table_args__ = (
        UniqueConstraint("account_id", "security_id", name="uq_holdings_account_security"),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    security_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("securities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    value: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False, default=Decimal("0"))
    price: Mapped[Decimal | None] = mapped_column(QUANTITY)
    cost_basis_user: Mapped[Decimal | None] = mapped_column(MONEY)
    cost_basis_provider: Mapped[Decimal | None] = mapped_column(MONEY)
    cost_basis: Mapped[Decimal | None] = mapped_column(MONEY)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    excluded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    account: Mapped["Account"] = relationship(back_populates="holdings")
    security: Mapped[Security] = relationship(back_populates="holdings")


class InvestmentTransaction(TimestampMixin, Base):
    """Buy, sell, dividend, fee or cash movement within an investment account."""

    __tablename__ = "investment_transactions"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    security_id: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("securities.id", ondelete="CASCADE"), index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    fees: Mapped[Decimal | None] = mapped_column(MONEY)
    flow: Mapped[Flow] = mapped_column(enum_column(Flow), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False, default=Decimal("0"))
    price: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False, default=Decimal("0"))
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    plaid_investment_transaction_id: Mapped[str | None] = mapped_column(
        String(255), unique=True
    )
    plaid_type: Mapped[str | None] = mapped_column(String(64))
    plaid_subtype: Mapped[str | None] = mapped_column(String(64))
    category: Mapped[str] = mapped_column(
        String(32), nullable=False, default=INVESTMENT_CATEGORY_FALLBACK
    )

    account: Mapped["Account"] = relationship(back_populates="investment_transactions")
    security: Mapped[Security | None] = relationship(back_populates="investment_transactions")
