"""Ordered lookup tables mapping provider taxonomies to canonical categories.

Every table is evaluated top to bottom and the first matching rule wins. The
order of the rules and the fallback strings are relied upon by consumers that
branch on the literal values, so both must stay stable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, TypeVar

from finstore.core.logger import get_logger

from .enums import (
    ASSET_ACCOUNT_TYPES,
    LIABILITY_ACCOUNT_TYPES,
    AccountClassification,
    AccountType,
)
from .errors import DerivationError

LOGGER = get_logger(__name__)

T = TypeVar("T")
Rule = tuple[Callable[[T], bool], str]

TRANSACTION_CATEGORY_FALLBACK = "Other"
INVESTMENT_CATEGORY_FALLBACK = "other"


def first_match(rules: Sequence[Rule[T]], subject: T, fallback: str) -> str:
    """Return the value of the first rule whose predicate accepts ``subject``."""

    for predicate, value in rules:
        if predicate(subject):
            return value
    return fallback


def classify_account(account_type: AccountType | str | None) -> AccountClassification:
    """Classify an account type as an asset or a liability.

    ``AccountType`` is closed, so an unmatched type means the row is corrupt.
    The fault is logged and raised rather than stored as a null classification.
    """

    try:
        resolved = AccountType(account_type)
    except ValueError:
        LOGGER.error("Account type %r has no classification", account_type)
        raise DerivationError("classification", account_type) from None

    if resolved in ASSET_ACCOUNT_TYPES:
        return AccountClassification.ASSET
    if resolved in LIABILITY_ACCOUNT_TYPES:
        return AccountClassification.LIABILITY
    LOGGER.error("Account type %s is neither an asset nor a liability", resolved.value)
    raise DerivationError("classification", account_type)


# ---------------------------------------------------------------------------
# Investment transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InvestmentTypeInput:
    type: str | None
    subtype: str | None


DIVIDEND_SUBTYPES = frozenset({"dividend", "qualified dividend", "non-qualified dividend"})
TAX_SUBTYPES = frozenset({"non-resident tax", "tax", "tax withheld"})
FEE_SUBTYPES = frozenset(
    {
        "account fee",
        "legal fee",
        "management fee",
        "margin expense",
        "transfer fee",
        "trust fee",
    }
)

INVESTMENT_CATEGORY_RULES: tuple[Rule[InvestmentTypeInput], ...] = (
    (lambda t: t.type == "buy", "buy"),
    (lambda t: t.type == "sell", "sell"),
    (lambda t: t.subtype in DIVIDEND_SUBTYPES, "dividend"),
    (lambda t: t.subtype in TAX_SUBTYPES, "tax"),
    (lambda t: t.type == "fee" or t.subtype in FEE_SUBTYPES, "fee"),
    (lambda t: t.type == "cash", "transfer"),
    (lambda t: t.type == "cancel", "cancel"),
)


def categorize_investment_transaction(plaid_type: str | None, plaid_subtype: str | None) -> str:
    """Map the provider's investment type/subtype pair to a canonical category."""

    return first_match(
        INVESTMENT_CATEGORY_RULES,
        InvestmentTypeInput(plaid_type, plaid_subtype),
        INVESTMENT_CATEGORY_FALLBACK,
    )


# ---------------------------------------------------------------------------
# Cash transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionTaxonomy:
    """Raw taxonomy fields from both aggregators for a single transaction."""

    primary: str | None = None
    detailed: str | None = None
    teller_category: str | None = None

    @classmethod
    def from_provider(
        cls,
        plaid_personal_finance_category: Mapping[str, Any] | None,
        teller_category: str | None,
    ) -> "TransactionTaxonomy":
        pfc = plaid_personal_finance_category or {}
        return cls(
            primary=pfc.get("primary"),
            detailed=pfc.get("detailed"),
            teller_category=teller_category,
        )


def _detailed_is_not(t: TransactionTaxonomy, value: str) -> bool:
    # A missing detailed code never satisfies an inequality test.
    return t.detailed is not None and t.detailed != value


PLAID_CATEGORY_RULES: tuple[Rule[TransactionTaxonomy], ...] = (
    (lambda t: t.primary == "INCOME", "Income"),
    (
        lambda t: t.detailed in {"LOAN_PAYMENTS_MORTGAGE_PAYMENT", "RENT_AND_UTILITIES_RENT"},
        "Housing Payments",
    ),
    (lambda t: t.detailed == "LOAN_PAYMENTS_CAR_PAYMENT", "Vehicle Payments"),
    (lambda t: t.primary == "LOAN_PAYMENTS", "Other Payments"),
    (lambda t: t.primary == "HOME_IMPROVEMENT", "Home Improvement"),
    (lambda t: t.primary == "GENERAL_MERCHANDISE", "Shopping"),
    (
        lambda t: t.primary == "RENT_AND_UTILITIES"
        and _detailed_is_not(t, "RENT_AND_UTILITIES_RENT"),
        "Utilities",
    ),
    (lambda t: t.primary == "FOOD_AND_DRINK", "Food and Drink"),
    (lambda t: t.primary == "TRANSPORTATION", "Transportation"),
    (lambda t: t.primary == "TRAVEL", "Travel"),
    (
        lambda t: t.primary in {"PERSONAL_CARE", "MEDICAL"}
        and _detailed_is_not(t, "MEDICAL_VETERINARY_SERVICES"),
        "Health and Fitness",
    ),
)

TELLER_CATEGORY_RULES: tuple[Rule[TransactionTaxonomy], ...] = (
    (lambda t: t.teller_category == "income", "Income"),
    (lambda t: t.teller_category == "home", "Home Improvement"),
    (lambda t: t.teller_category in {"phone", "utilities"}, "Utilities"),
    (lambda t: t.teller_category in {"dining", "bar", "groceries"}, "Food and Drink"),
    (
        lambda t: t.teller_category
        in {"clothing", "entertainment", "shopping", "electronics", "software", "sport"},
        "Shopping",
    ),
    (lambda t: t.teller_category in {"transportation", "fuel"}, "Transportation"),
    (lambda t: t.teller_category in {"accommodation", "transport"}, "Travel"),
    (lambda t: t.teller_category == "health", "Health and Fitness"),
    (lambda t: t.teller_category in {"loan", "tax", "insurance", "office"}, "Other Payments"),
)

TRANSACTION_CATEGORY_RULES = PLAID_CATEGORY_RULES + TELLER_CATEGORY_RULES


def categorize_transaction(
    category_user: str | None,
    plaid_personal_finance_category: Mapping[str, Any] | None = None,
    teller_category: str | None = None,
) -> str:
    """Return the effective category of a cash transaction."""

    if category_user is not None:
        return category_user
    taxonomy = TransactionTaxonomy.from_provider(plaid_personal_finance_category, teller_category)
    return first_match(TRANSACTION_CATEGORY_RULES, taxonomy, TRANSACTION_CATEGORY_FALLBACK)
