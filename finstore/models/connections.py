"""Linked institution sessions held with an aggregation provider."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finstore.domain.enums import AccountConnectionType, ConnectionStatus, SyncStatus

from .base import ID_TYPE, JSON_DICT, Base, TimestampMixin, enum_column

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .accounts import Account
    from .users import User

PLAID_FIELDS = (
    "plaid_item_id",
    "plaid_access_token",
    "plaid_error",
    "plaid_consent_expiration",
)
TELLER_FIELDS = (
    "teller_access_token",
    "teller_enrollment_id",
    "teller_user_id",
    "teller_error",
)


class AccountConnection(TimestampMixin, Base):
    """One provider link for a user.

    ``status`` and ``sync_status`` are written by the sync collaborator and are
    only recorded here. Only the fields of the provider named by ``type`` may
    be populated.
    """

    __tablename__ = "account_connections"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[AccountConnectionType] = mapped_column(
        enum_column(AccountConnectionType), nullable=False
    )
    status: Mapped[ConnectionStatus] = mapped_column(
        enum_column(ConnectionStatus), nullable=False, default=ConnectionStatus.OK
    )
    sync_status: Mapped[SyncStatus] = mapped_column(
        enum_column(SyncStatus), nullable=False, default=SyncStatus.IDLE
    )
    provider_institution_id: Mapped[str | None] = mapped_column(String(255))

    plaid_item_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    plaid_access_token: Mapped[str | None] = mapped_column(Text)
    plaid_error: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    plaid_new_accounts_available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    plaid_consent_expiration: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    teller_access_token: Mapped[str | None] = mapped_column(Text)
    teller_enrollment_id: Mapped[str | None] = mapped_column(String(255), unique=True)
    teller_user_id: Mapped[str | None] = mapped_column(String(255))
    teller_error: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)

    user: Mapped["User"] = relationship(back_populates="account_connections")
    accounts: Mapped[list["Account"]] = relationship(back_populates="connection", cascade="all")

    def inactive_provider_fields(self) -> tuple[str, ...]:
        """Names of the fields belonging to the provider this link is not for."""

        if AccountConnectionType(self.type) is AccountConnectionType.PLAID:
            return TELLER_FIELDS
        return PLAID_FIELDS
