"""Database models for the finance aggregation domain."""
from __future__ import annotations

from finstore.domain.enums import (
    AccountClassification,
    AccountConnectionType,
    AccountType,
    AuditEventType,
    BalanceStrategy,
    ConnectionStatus,
    Flow,
    PlanEventFrequency,
    PlanEventValueRef,
    PlanMilestoneType,
    Provider,
    SyncStatus,
)

from .accounts import Account, AccountBalance, Valuation
from .audit import AuditEvent
from .auth import AuthAccount, AuthSession, AuthUser, AuthVerificationToken
from .base import Base
from .connections import AccountConnection
from .institutions import Institution, ProviderInstitution
from .investments import Holding, InvestmentTransaction, Security, SecurityPricing
from .plans import Plan, PlanEvent, PlanMilestone
from .transactions import Transaction
from .users import User

# Registers the write-time derivation hooks.
from .derived import refresh_derived  # noqa: E402

__all__ = [
    "Base",
    "Account",
    "AccountBalance",
    "AccountClassification",
    "AccountConnection",
    "AccountConnectionType",
    "AccountType",
    "AuditEvent",
    "AuditEventType",
    "AuthAccount",
    "AuthSession",
    "AuthUser",
    "AuthVerificationToken",
    "BalanceStrategy",
    "ConnectionStatus",
    "Flow",
    "Holding",
    "Institution",
    "InvestmentTransaction",
    "Plan",
    "PlanEvent",
    "PlanEventFrequency",
    "PlanEventValueRef",
    "PlanMilestone",
    "PlanMilestoneType",
    "Provider",
    "ProviderInstitution",
    "Security",
    "SecurityPricing",
    "SyncStatus",
    "Transaction",
    "User",
    "Valuation",
    "refresh_derived",
]
