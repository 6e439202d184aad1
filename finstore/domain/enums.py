"""Closed enumerations shared by the resolvers and the ORM models."""
from __future__ import annotations

from enum import Enum


class AccountType(str, Enum):
    """Kind of financial account; drives the asset/liability classification."""

    INVESTMENT = "INVESTMENT"
    DEPOSITORY = "DEPOSITORY"
    CREDIT = "CREDIT"
    LOAN = "LOAN"
    PROPERTY = "PROPERTY"
    VEHICLE = "VEHICLE"
    OTHER_ASSET = "OTHER_ASSET"
    OTHER_LIABILITY = "OTHER_LIABILITY"


class AccountClassification(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"


class BalanceStrategy(str, Enum):
    """Computation used to derive an account balance from its sources."""

    CURRENT = "current"
    AVAILABLE = "available"
    SUM = "sum"
    DIFFERENCE = "difference"


class AccountConnectionType(str, Enum):
    PLAID = "plaid"
    TELLER = "teller"


class ConnectionStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"
    DISCONNECTED = "DISCONNECTED"


class SyncStatus(str, Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"
    SYNCING = "SYNCING"


class Flow(str, Enum):
    """Direction of a monetary movement, derived from the amount sign."""

    INFLOW = "INFLOW"
    OUTFLOW = "OUTFLOW"


class Provider(str, Enum):
    """Aggregation provider that supplied an institution record."""

    PLAID = "PLAID"
    TELLER = "TELLER"


class AuditEventType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class PlanEventFrequency(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PlanEventValueRef(str, Enum):
    NET_WORTH = "net_worth"
    INCOME = "income"
    EXPENSES = "expenses"


class PlanMilestoneType(str, Enum):
    YEAR = "year"
    NET_WORTH = "net_worth"


ASSET_ACCOUNT_TYPES = frozenset(
    {
        AccountType.INVESTMENT,
        AccountType.DEPOSITORY,
        AccountType.PROPERTY,
        AccountType.VEHICLE,
        AccountType.OTHER_ASSET,
    }
)
LIABILITY_ACCOUNT_TYPES = frozenset(
    {AccountType.CREDIT, AccountType.LOAN, AccountType.OTHER_LIABILITY}
)
