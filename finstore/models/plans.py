"""Financial projection plans made of events anchored to milestones."""
from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finstore.domain.enums import PlanEventFrequency, PlanEventValueRef, PlanMilestoneType

from .base import ID_TYPE, MONEY, Base, TimestampMixin, enum_column

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .users import User


class Plan(TimestampMixin, Base):
    """Projection owned by a user."""

    __tablename__ = "plans"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    life_expectancy: Mapped[int] = mapped_column(Integer, nullable=False, default=85)

    user: Mapped["User"] = relationship(back_populates="plans")
    events: Mapped[list["PlanEvent"]] = relationship(back_populates="plan", cascade="all")
    milestones: Mapped[list["PlanMilestone"]] = relationship(
        back_populates="plan", cascade="all"
    )


class PlanMilestone(TimestampMixin, Base):
    """Point in a plan, either a calendar year or a net-worth target."""

    __tablename__ = "plan_milestones"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    plan_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[PlanMilestoneType] = mapped_column(
        enum_column(PlanMilestoneType), nullable=False
    )
    year: Mapped[int | None] = mapped_column(Integer)
    expense_multiple: Mapped[Decimal | None] = mapped_column(Numeric(10, 4))
    expense_years: Mapped[int | None] = mapped_column(Integer)

    plan: Mapped[Plan] = relationship(back_populates="milestones")
    start_events: Mapped[list["PlanEvent"]] = relationship(
        back_populates="start_milestone",
        foreign_keys="PlanEvent.start_milestone_id",
        cascade="all",
    )
    end_events: Mapped[list["PlanEvent"]] = relationship(
        back_populates="end_milestone",
        foreign_keys="PlanEvent.end_milestone_id",
        cascade="all",
    )


class PlanEvent(TimestampMixin, Base):
    """Recurring cash flow between an optional start and end milestone.

    Milestone references are not checked for cycles.
    """

    __tablename__ = "plan_events"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    plan_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_milestone_id: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("plan_milestones.id", ondelete="CASCADE"), index=True
    )
    end_milestone_id: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("plan_milestones.id", ondelete="CASCADE"), index=True
    )
    frequency: Mapped[PlanEventFrequency] = mapped_column(
        enum_column(PlanEventFrequency), nullable=False, default=PlanEventFrequency.YEARLY
    )
    initial_value: Mapped[Decimal | None] = mapped_column(MONEY)
    initial_value_ref: Mapped[PlanEventValueRef | None] = mapped_column(
        enum_column(PlanEventValueRef)
    )
    rate: Mapped[Decimal] = mapped_column(Numeric(10, 6), nullable=False, default=Decimal("0"))

    plan: Mapped[Plan] = relationship(back_populates="events")
    start_milestone: Mapped[PlanMilestone | None] = relationship(
        back_populates="start_events", foreign_keys=[start_milestone_id]
    )
    end_milestone: Mapped[PlanMilestone | None] = relationship(
        back_populates="end_events", foreign_keys=[end_milestone_id]
    )
