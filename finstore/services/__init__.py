"""Data-access services used by the application and sync collaborators."""

from .accounts_service import AccountsService
from .audit import record_audit_event, track_audit_events
from .connections_service import ConnectionsService
from .institutions_service import InstitutionsService
from .overrides_service import OverridesService
from .plans_service import PlansService
from .snapshots import upsert_account_balances, upsert_security_prices
from .transactions_service import TransactionsService
from .users_service import UsersService

__all__ = [
    "AccountsService",
    "ConnectionsService",
    "InstitutionsService",
    "OverridesService",
    "PlansService",
    "TransactionsService",
    "UsersService",
    "record_audit_event",
    "track_audit_events",
    "upsert_account_balances",
    "upsert_security_prices",
]
