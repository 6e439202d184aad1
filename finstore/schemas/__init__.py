"""Pydantic payloads exchanged with the user-facing layer."""

from .overrides import AccountOverrides, HoldingOverrides, TransactionOverrides, UserOverrides
from .summaries import AccountSummary, NetWorthSummary, TransactionSummary

__all__ = [
    "AccountOverrides",
    "AccountSummary",
    "HoldingOverrides",
    "NetWorthSummary",
    "TransactionOverrides",
    "TransactionSummary",
    "UserOverrides",
]
