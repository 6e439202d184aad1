"""Application users."""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import ID_TYPE, Base, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .accounts import Account
    from .connections import AccountConnection
    from .plans import Plan


class User(TimestampMixin, Base):
    """End user of the application.

    ``auth_id`` holds the identifier issued by the auth collaborator. It is
    matched against ``AuthUser.id`` in joins only; there is no foreign key.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    auth_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(120))
    last_name: Mapped[str | None] = mapped_column(String(120))
    name_user: Mapped[str | None] = mapped_column(String(255))
    name_provider: Mapped[str | None] = mapped_column(String(255))
    name: Mapped[str | None] = mapped_column(String(255))

    account_connections: Mapped[list["AccountConnection"]] = relationship(
        back_populates="user", cascade="all"
    )
    accounts: Mapped[list["Account"]] = relationship(back_populates="user", cascade="all")
    plans: Mapped[list["Plan"]] = relationship(back_populates="user", cascade="all")


# Emails compare case-insensitively, so uniqueness is enforced on lower(email).
Index("uq_users_email_lower", func.lower(User.email), unique=True)
