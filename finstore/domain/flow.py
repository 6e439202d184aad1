"""Sign-based inflow/outflow classification."""
from __future__ import annotations

from decimal import Decimal

from .enums import Flow


def resolve_flow(amount: Decimal | int | float) -> Flow:
    """Negative amounts are inflows; zero and positive amounts are outflows."""

    return Flow.INFLOW if amount < 0 else Flow.OUTFLOW
