"""Base declarative class and column helpers for SQLAlchemy models."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Type

from sqlalchemy import JSON, BigInteger, DateTime, Enum as SQLEnum, Integer, Numeric
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

ID_TYPE = BigInteger().with_variant(Integer, "sqlite")
MONEY = Numeric(19, 4)
# In-place edits of these values mark the row dirty.
JSON_DICT = MutableDict.as_mutable(JSON)
JSON_LIST = MutableList.as_mutable(JSON)


def enum_column(enum_cls: Type[Enum]) -> SQLEnum:
    """Store ``enum_cls`` by value as a non-native, length-checked string."""

    return SQLEnum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
        length=32,
    )


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass


class TimestampMixin:
    """Creation and modification timestamps maintained by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )
