"""ORM model for cash transactions."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finstore.domain.categories import TRANSACTION_CATEGORY_FALLBACK
from finstore.domain.enums import Flow

from .base import ID_TYPE, JSON_DICT, JSON_LIST, MONEY, Base, TimestampMixin, enum_column

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .accounts import Account


class Transaction(TimestampMixin, Base):
    """Posted or pending cash movement on an account.

    ``match_id`` records the canonical counterpart of a transfer pair as found
    by the external matcher. The relation is not required to be symmetric.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    flow: Mapped[Flow] = mapped_column(enum_column(Flow), nullable=False)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    pending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    excluded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    merchant_name: Mapped[str | None] = mapped_column(String(255))

    category_user: Mapped[str | None] = mapped_column(String(64))
    category: Mapped[str] = mapped_column(
        String(64), nullable=False, default=TRANSACTION_CATEGORY_FALLBACK
    )

    plaid_transaction_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    plaid_category: Mapped[list[str] | None] = mapped_column(JSON_LIST)
    plaid_category_id: Mapped[str | None] = mapped_column(String(32))
    plaid_personal_finance_category: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    teller_transaction_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    teller_type: Mapped[str | None] = mapped_column(String(64))
    teller_category: Mapped[str | None] = mapped_column(String(64))

    match_id: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("transactions.id", ondelete="SET NULL"), index=True
    )

    account: Mapped["Account"] = relationship(back_populates="transactions")
    match: Mapped["Transaction | None"] = relationship(
        back_populates="matches", remote_side=[id], post_update=True
    )
    matches: Mapped[list["Transaction"]] = relationship(back_populates="match")
