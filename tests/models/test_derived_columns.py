"""Effective columns are written by the flush hooks together with their inputs."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from finstore.domain.errors import InvariantViolation
from finstore.models import (
    Account,
    AccountClassification,
    AccountConnection,
    AccountConnectionType,
    AccountType,
    BalanceStrategy,
    Flow,
    Holding,
    InvestmentTransaction,
    Security,
    Transaction,
    User,
    refresh_derived,
)


def _reload(session: Session, obj):
    session.flush()
    session.expire(obj)
    return obj


def _manual_account(session: Session, user: User, **fields) -> Account:
    fields.setdefault("name", "Manual")
    fields.setdefault("type", AccountType.DEPOSITORY)
    account = Account(user_id=user.id, **fields)
    session.add(account)
    session.flush()
    return account


def _transaction(session: Session, account: Account, amount: str, **fields) -> Transaction:
    fields.setdefault("name", "Purchase")
    transaction = Transaction(
        account_id=account.id, date=date(2024, 3, 1), amount=Decimal(amount), **fields
    )
    session.add(transaction)
    session.flush()
    return transaction


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("account_type", "expected"),
    [
        (AccountType.DEPOSITORY, AccountClassification.ASSET),
        (AccountType.PROPERTY, AccountClassification.ASSET),
        (AccountType.CREDIT, AccountClassification.LIABILITY),
        (AccountType.LOAN, AccountClassification.LIABILITY),
    ],
)
def test_account_classification_written_on_insert(
    session: Session, user: User, account_type: AccountType, expected: AccountClassification
) -> None:
    account = _manual_account(session, user, type=account_type)

    assert _reload(session, account).classification is expected


def test_account_classification_follows_type_changes(session: Session, user: User) -> None:
    account = _manual_account(session, user, type=AccountType.DEPOSITORY)

    account.type = AccountType.CREDIT
    assert _reload(session, account).classification is AccountClassification.LIABILITY


def test_account_category_resolution(session: Session, linked_account: Account) -> None:
    assert _reload(session, linked_account).category == "cash"
    assert linked_account.subcategory == "checking"

    linked_account.category_user = "savings"
    assert _reload(session, linked_account).category == "savings"

    linked_account.category_user = None
    linked_account.category_provider = None
    assert _reload(session, linked_account).category == "other"
    assert linked_account.subcategory == "checking"


def test_account_sum_and_difference_strategies(session: Session, linked_account: Account) -> None:
    linked_account.current_balance_provider = Decimal("50.00")
    linked_account.available_balance_provider = Decimal("25.00")
    linked_account.current_balance_strategy = BalanceStrategy.SUM
    assert _reload(session, linked_account).current_balance == Decimal("75.00")
    assert linked_account.available_balance == Decimal("25.00")

    linked_account.current_balance_strategy = BalanceStrategy.DIFFERENCE
    assert _reload(session, linked_account).current_balance == Decimal("25.00")


def test_user_balance_overrides_provider_source(session: Session, linked_account: Account) -> None:
    linked_account.current_balance_provider = Decimal("50.00")
    linked_account.current_balance_user = Decimal("10.00")
    linked_account.available_balance_provider = Decimal("25.00")
    linked_account.available_balance_strategy = BalanceStrategy.SUM

    _reload(session, linked_account)

    assert linked_account.current_balance == Decimal("10.00")
    assert linked_account.available_balance == Decimal("35.00")


def test_default_strategies_applied_before_first_flush(user: User) -> None:
    account = Account(user_id=user.id, name="Draft", type=AccountType.VEHICLE)
    account.current_balance_provider = Decimal("12000")

    refresh_derived(account)

    assert account.current_balance_strategy is BalanceStrategy.CURRENT
    assert account.available_balance_strategy is BalanceStrategy.AVAILABLE
    assert account.current_balance == Decimal("12000")
    assert account.available_balance is None
    assert account.classification is AccountClassification.ASSET


def test_loan_and_credit_details_resolve(session: Session, linked_account: Account) -> None:
    linked_account.credit_provider = {"apr": 24.99}
    linked_account.loan_provider = {"term": 360}
    linked_account.loan_user = {"term": 180}

    _reload(session, linked_account)

    assert linked_account.credit == {"apr": 24.99}
    assert linked_account.loan == {"term": 180}


def test_in_place_detail_edit_refreshes_resolved_value(
    session: Session, linked_account: Account
) -> None:
    linked_account.loan_user = {"term": 180}
    _reload(session, linked_account)

    linked_account.loan_user["rate"] = 5
    assert linked_account in session.dirty
    _reload(session, linked_account)

    assert linked_account.loan == {"term": 180, "rate": 5}
    assert linked_account.loan_user == {"term": 180, "rate": 5}


def test_account_without_owner_is_rejected(session: Session) -> None:
    session.add(Account(name="Orphan", type=AccountType.DEPOSITORY))

    with pytest.raises(InvariantViolation):
        session.flush()


def test_account_with_two_owners_is_rejected(
    session: Session, user: User, plaid_connection: AccountConnection
) -> None:
    session.add(
        Account(
            name="Ambiguous",
            type=AccountType.DEPOSITORY,
            user_id=user.id,
            account_connection_id=plaid_connection.id,
        )
    )

    with pytest.raises(InvariantViolation):
        session.flush()


# ---------------------------------------------------------------------------
# Connections and users
# ---------------------------------------------------------------------------


def test_connection_rejects_other_provider_fields(session: Session, user: User) -> None:
    session.add(
        AccountConnection(
            user_id=user.id,
            name="Mixed",
            type=AccountConnectionType.TELLER,
            teller_enrollment_id="enr-1",
            plaid_item_id="item-9",
        )
    )

    with pytest.raises(InvariantViolation, match="plaid_item_id"):
        session.flush()


def test_teller_connection_accepts_its_own_fields(session: Session, user: User) -> None:
    connection = AccountConnection(
        user_id=user.id,
        name="Teller Bank",
        type=AccountConnectionType.TELLER,
        teller_enrollment_id="enr-1",
        teller_access_token="token",
    )
    session.add(connection)
    session.flush()

    assert connection.id is not None


def test_user_name_resolution(session: Session, user: User) -> None:
    assert _reload(session, user).name == "Alice Example"

    user.name_provider = "A. Example"
    assert _reload(session, user).name == "A. Example"

    user.name_user = "Ali"
    assert _reload(session, user).name == "Ali"


# ---------------------------------------------------------------------------
# Holdings
# ---------------------------------------------------------------------------


def test_cost_basis_round_trip(session: Session, linked_account: Account) -> None:
    security = Security(name="Index Fund", symbol="IDX")
    session.add(security)
    session.flush()
    holding = Holding(
        account_id=linked_account.id,
        security_id=security.id,
        cost_basis_user=Decimal("100.00"),
        cost_basis_provider=Decimal("90.00"),
    )
    session.add(holding)

    assert _reload(session, holding).cost_basis == Decimal("100.00")

    holding.cost_basis_user = None
    assert _reload(session, holding).cost_basis == Decimal("90.00")


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("amount", "expected"),
    [("-120.50", Flow.INFLOW), ("0", Flow.OUTFLOW), ("19.99", Flow.OUTFLOW)],
)
def test_transaction_flow(
    session: Session, linked_account: Account, amount: str, expected: Flow
) -> None:
    transaction = _transaction(session, linked_account, amount)

    assert _reload(session, transaction).flow is expected


def test_transaction_flow_follows_amount_changes(
    session: Session, linked_account: Account
) -> None:
    transaction = _transaction(session, linked_account, "10")

    transaction.amount = Decimal("-10")
    assert _reload(session, transaction).flow is Flow.INFLOW


def test_transaction_category_from_plaid(session: Session, linked_account: Account) -> None:
    transaction = _transaction(
        session,
        linked_account,
        "4.50",
        plaid_personal_finance_category={
            "primary": "FOOD_AND_DRINK",
            "detailed": "FOOD_AND_DRINK_COFFEE",
        },
    )

    assert _reload(session, transaction).category == "Food and Drink"

    transaction.plaid_personal_finance_category["primary"] = "TRAVEL"
    assert _reload(session, transaction).category == "Travel"


def test_transaction_user_category_and_clearing_it(
    session: Session, linked_account: Account
) -> None:
    transaction = _transaction(session, linked_account, "60", teller_category="fuel")
    assert _reload(session, transaction).category == "Transportation"

    transaction.category_user = "Road Trip"
    assert _reload(session, transaction).category == "Road Trip"

    transaction.category_user = None
    assert _reload(session, transaction).category == "Transportation"


def test_transaction_without_taxonomy_is_other(session: Session, linked_account: Account) -> None:
    transaction = _transaction(session, linked_account, "5")

    assert _reload(session, transaction).category == "Other"


def test_investment_transaction_derivations(session: Session, linked_account: Account) -> None:
    rows = [
        InvestmentTransaction(
            account_id=linked_account.id,
            date=date(2024, 1, 2),
            name=name,
            amount=Decimal(amount),
            plaid_type=plaid_type,
            plaid_subtype=plaid_subtype,
        )
        for name, amount, plaid_type, plaid_subtype in [
            ("Buy IDX", "500", "buy", "buy"),
            ("Dividend", "-12.34", "cash", "qualified dividend"),
            ("Deposit", "-1000", "cash", "deposit"),
            ("Adjustment", "0", "transfer", "adjustment"),
        ]
    ]
    session.add_all(rows)
    session.flush()
    session.expire_all()

    stored = session.scalars(
        select(InvestmentTransaction).order_by(InvestmentTransaction.id)
    ).all()
    assert [(row.category, row.flow) for row in stored] == [
        ("buy", Flow.OUTFLOW),
        ("dividend", Flow.INFLOW),
        ("transfer", Flow.INFLOW),
        ("other", Flow.OUTFLOW),
    ]
