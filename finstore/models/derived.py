"""Recompute effective columns whenever a row is inserted or updated.

Each ``derive_*`` function writes the effective values of one model from its
stored inputs. The functions run inside mapper ``before_insert`` and
``before_update`` hooks, so the effective columns are always written in the
same statement as the inputs they depend on. They can also be called directly
to refresh an object before it is flushed.
"""
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import event

from finstore.core.logger import get_logger
from finstore.domain.categories import (
    categorize_investment_transaction,
    categorize_transaction,
    classify_account,
)
from finstore.domain.enums import AccountConnectionType, BalanceStrategy
from finstore.domain.errors import InvariantViolation
from finstore.domain.flow import resolve_flow
from finstore.domain.overrides import (
    ACCOUNT_CATEGORY_FALLBACK,
    resolve,
    resolve_balance,
    resolve_name,
)

from .accounts import Account
from .audit import AuditEvent
from .connections import AccountConnection
from .investments import Holding, InvestmentTransaction
from .transactions import Transaction
from .users import User

LOGGER = get_logger(__name__)


def _detached(details: dict[str, Any] | None) -> dict[str, Any] | None:
    return None if details is None else dict(details)


def derive_account(account: Account) -> None:
    if (account.account_connection_id is None) == (account.user_id is None):
        LOGGER.error(
            "Account %s has connection=%s user=%s",
            account.id,
            account.account_connection_id,
            account.user_id,
        )
        raise InvariantViolation(
            "An account must belong to exactly one of a connection or a user"
        )

    account.classification = classify_account(account.type)
    account.category = resolve(
        account.category_user, account.category_provider, ACCOUNT_CATEGORY_FALLBACK
    )
    account.subcategory = resolve(
        account.subcategory_user, account.subcategory_provider, ACCOUNT_CATEGORY_FALLBACK
    )

    # Column defaults are only applied by the INSERT itself.
    if account.current_balance_strategy is None:
        account.current_balance_strategy = BalanceStrategy.CURRENT
    if account.available_balance_strategy is None:
        account.available_balance_strategy = BalanceStrategy.AVAILABLE

    current = resolve(account.current_balance_user, account.current_balance_provider)
    available = resolve(account.available_balance_user, account.available_balance_provider)
    account.current_balance = resolve_balance(account.current_balance_strategy, current, available)
    account.available_balance = resolve_balance(
        account.available_balance_strategy, current, available
    )

    # The resolved dict never aliases its source.
    account.loan = _detached(resolve(account.loan_user, account.loan_provider))
    account.credit = _detached(resolve(account.credit_user, account.credit_provider))


def derive_connection(connection: AccountConnection) -> None:
    stray = [
        name
        for name in connection.inactive_provider_fields()
        if getattr(connection, name) is not None
    ]
    if stray:
        provider = AccountConnectionType(connection.type).value
        raise InvariantViolation(f"{provider} connection cannot carry {', '.join(stray)}")


def derive_holding(holding: Holding) -> None:
    holding.cost_basis = resolve(holding.cost_basis_user, holding.cost_basis_provider)


def derive_transaction(transaction: Transaction) -> None:
    transaction.flow = resolve_flow(transaction.amount)
    transaction.category = categorize_transaction(
        transaction.category_user,
        transaction.plaid_personal_finance_category,
        transaction.teller_category,
    )


def derive_investment_transaction(transaction: InvestmentTransaction) -> None:
    transaction.flow = resolve_flow(transaction.amount)
    transaction.category = categorize_investment_transaction(
        transaction.plaid_type, transaction.plaid_subtype
    )


def derive_user(user: User) -> None:
    user.name = resolve_name(user.name_user, user.name_provider, user.first_name, user.last_name)


DERIVERS: dict[type, Callable[[Any], None]] = {
    Account: derive_account,
    AccountConnection: derive_connection,
    Holding: derive_holding,
    Transaction: derive_transaction,
    InvestmentTransaction: derive_investment_transaction,
    User: derive_user,
}


def refresh_derived(target: Any) -> None:
    """Recompute the effective columns of ``target`` in place."""

    deriver = DERIVERS.get(type(target))
    if deriver is not None:
        deriver(target)


def _make_listener(deriver: Callable[[Any], None]) -> Callable[..., None]:
    def _listener(mapper, connection, target) -> None:
        deriver(target)

    return _listener


for _model, _deriver in DERIVERS.items():
    _hook = _make_listener(_deriver)
    event.listen(_model, "before_insert", _hook)
    event.listen(_model, "before_update", _hook)


@event.listens_for(AuditEvent, "before_update")
def _audit_event_before_update(mapper, connection, target: AuditEvent) -> None:
    raise InvariantViolation("Audit events are immutable")


@event.listens_for(AuditEvent, "before_delete")
def _audit_event_before_delete(mapper, connection, target: AuditEvent) -> None:
    raise InvariantViolation("Audit events are immutable")
