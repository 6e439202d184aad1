"""Pure derivation rules for the finance data model."""

from .categories import (
    categorize_investment_transaction,
    categorize_transaction,
    classify_account,
)
from .errors import DerivationError, FinstoreError, InvariantViolation, NotFoundError
from .flow import resolve_flow
from .overrides import resolve, resolve_balance, resolve_name

__all__ = [
    "DerivationError",
    "FinstoreError",
    "InvariantViolation",
    "NotFoundError",
    "categorize_investment_transaction",
    "categorize_transaction",
    "classify_account",
    "resolve",
    "resolve_balance",
    "resolve_flow",
    "resolve_name",
]
