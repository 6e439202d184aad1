"""Effective-value resolution for user-overridable fields."""
from __future__ import annotations

from decimal import Decimal
from typing import Callable, Mapping, Optional, TypeVar

from .enums import BalanceStrategy
from .errors import DerivationError

T = TypeVar("T")

ACCOUNT_CATEGORY_FALLBACK = "other"

_ZERO = Decimal("0")


def resolve(user: Optional[T], provider: Optional[T], fallback: Optional[T] = None) -> Optional[T]:
    """Return the user value if set, else the provider value, else ``fallback``.

    Only ``None`` counts as unset; falsy values such as ``0`` or ``{}`` win.
    """

    if user is not None:
        return user
    if provider is not None:
        return provider
    return fallback


BalanceFn = Callable[[Optional[Decimal], Optional[Decimal]], Optional[Decimal]]

BALANCE_STRATEGIES: Mapping[BalanceStrategy, BalanceFn] = {
    BalanceStrategy.CURRENT: lambda current, available: current,
    BalanceStrategy.AVAILABLE: lambda current, available: available,
    BalanceStrategy.SUM: lambda current, available: (current or _ZERO) + (available or _ZERO),
    BalanceStrategy.DIFFERENCE: lambda current, available: (current or _ZERO)
    - (available or _ZERO),
}


def resolve_balance(
    strategy: BalanceStrategy | str,
    current: Optional[Decimal],
    available: Optional[Decimal],
) -> Optional[Decimal]:
    """Compute a balance by dispatching on ``strategy``.

    ``current`` and ``available`` are the two balance sources, each already
    resolved from its user and provider values.
    """

    try:
        compute = BALANCE_STRATEGIES[BalanceStrategy(strategy)]
    except ValueError:
        raise DerivationError("balance strategy", strategy) from None
    return compute(current, available)


def build_full_name(first_name: str | None, last_name: str | None) -> str | None:
    """Join the non-empty name parts, or return ``None`` when there are none."""

    parts = [part.strip() for part in (first_name, last_name) if part and part.strip()]
    return " ".join(parts) or None


def resolve_name(
    name_user: str | None,
    name_provider: str | None,
    first_name: str | None,
    last_name: str | None,
) -> str | None:
    return resolve(name_user, name_provider, build_full_name(first_name, last_name))
