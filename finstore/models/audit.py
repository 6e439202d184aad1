"""Append-only audit log."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from finstore.domain.enums import AuditEventType

from .base import ID_TYPE, Base, enum_column


class AuditEvent(Base):
    """Insert, update or delete recorded against a tracked model row.

    ``user_id`` is the acting user; ``None`` marks an automated change. It is
    not a foreign key so that entries outlive the rows they describe.
    """

    __tablename__ = "audit_events"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    type: Mapped[AuditEventType] = mapped_column(enum_column(AuditEventType), nullable=False)
    model: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    model_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    user_id: Mapped[int | None] = mapped_column(BigInteger)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
