"""Plan graph queries."""
from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from finstore.models import PlanEvent


class PlansService:
    def events_for_milestone(self, session: Session, milestone_id: int) -> list[PlanEvent]:
        """Events that start or end at ``milestone_id``."""

        stmt = (
            select(PlanEvent)
            .where(
                or_(
                    PlanEvent.start_milestone_id == milestone_id,
                    PlanEvent.end_milestone_id == milestone_id,
                )
            )
            .order_by(PlanEvent.id)
        )
        return list(session.scalars(stmt))
