"""Institution directory and per-provider institution records."""
from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finstore.domain.enums import Provider

from .base import ID_TYPE, JSON_DICT, Base, TimestampMixin, enum_column


class Institution(TimestampMixin, Base):
    """Canonical institution shared by the records of every provider."""

    __tablename__ = "institutions"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(String(512))
    logo: Mapped[str | None] = mapped_column(String)
    logo_url: Mapped[str | None] = mapped_column(String(512))
    primary_color: Mapped[str | None] = mapped_column(String(16))

    # No delete cascade: removing an institution detaches its provider rows.
    provider_institutions: Mapped[list["ProviderInstitution"]] = relationship(
        back_populates="institution"
    )


class ProviderInstitution(TimestampMixin, Base):
    """Institution as reported by one aggregation provider."""

    __tablename__ = "provider_institutions"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_provider_institutions_provider_id"),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    provider: Mapped[Provider] = mapped_column(enum_column(Provider), nullable=False)
    provider_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(String(512))
    logo: Mapped[str | None] = mapped_column(String)
    logo_url: Mapped[str | None] = mapped_column(String(512))
    primary_color: Mapped[str | None] = mapped_column(String(16))
    oauth: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSON_DICT)
    institution_id: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("institutions.id", ondelete="SET NULL"), index=True
    )

    institution: Mapped[Institution | None] = relationship(back_populates="provider_institutions")
