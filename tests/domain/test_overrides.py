"""Tests for user/provider override resolution and balance strategies."""
from __future__ import annotations

from decimal import Decimal

import pytest

from finstore.domain.enums import BalanceStrategy
from finstore.domain.errors import DerivationError
from finstore.domain.overrides import build_full_name, resolve, resolve_balance, resolve_name


def test_user_value_wins_over_provider() -> None:
    assert resolve("brokerage", "cash", "other") == "brokerage"


def test_provider_value_used_when_user_unset() -> None:
    assert resolve(None, "cash", "other") == "cash"


def test_fallback_used_when_both_unset() -> None:
    assert resolve(None, None, "other") == "other"
    assert resolve(None, None) is None


def test_falsy_user_values_still_win() -> None:
    assert resolve(Decimal("0"), Decimal("90")) == Decimal("0")
    assert resolve({}, {"apr": 19.9}) == {}
    assert resolve("", "cash") == ""


@pytest.mark.parametrize(
    ("strategy", "expected"),
    [
        (BalanceStrategy.CURRENT, Decimal("50.00")),
        (BalanceStrategy.AVAILABLE, Decimal("25.00")),
        (BalanceStrategy.SUM, Decimal("75.00")),
        (BalanceStrategy.DIFFERENCE, Decimal("25.00")),
    ],
)
def test_balance_strategies(strategy: BalanceStrategy, expected: Decimal) -> None:
    assert resolve_balance(strategy, Decimal("50.00"), Decimal("25.00")) == expected


def test_strategy_accepts_raw_value() -> None:
    assert resolve_balance("sum", Decimal("1"), Decimal("2")) == Decimal("3")


def test_sum_and_difference_treat_missing_sources_as_zero() -> None:
    assert resolve_balance(BalanceStrategy.SUM, None, Decimal("25")) == Decimal("25")
    assert resolve_balance(BalanceStrategy.DIFFERENCE, None, Decimal("25")) == Decimal("-25")
    assert resolve_balance(BalanceStrategy.SUM, None, None) == Decimal("0")


def test_single_source_strategies_keep_missing_sources_null() -> None:
    assert resolve_balance(BalanceStrategy.CURRENT, None, Decimal("25")) is None
    assert resolve_balance(BalanceStrategy.AVAILABLE, Decimal("50"), None) is None


def test_unknown_strategy_is_rejected() -> None:
    with pytest.raises(DerivationError):
        resolve_balance("average", Decimal("1"), Decimal("2"))


def test_full_name_skips_blank_parts() -> None:
    assert build_full_name("Ada", "Lovelace") == "Ada Lovelace"
    assert build_full_name("Ada", None) == "Ada"
    assert build_full_name("  ", "Lovelace") == "Lovelace"
    assert build_full_name(None, None) is None


def test_name_resolution_order() -> None:
    assert resolve_name("Countess", "A. Lovelace", "Ada", "Lovelace") == "Countess"
    assert resolve_name(None, "A. Lovelace", "Ada", "Lovelace") == "A. Lovelace"
    assert resolve_name(None, None, "Ada", "Lovelace") == "Ada Lovelace"
    assert resolve_name(None, None, None, None) is None
