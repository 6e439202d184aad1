"""Daily snapshot upserts overwrite by natural key."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from finstore.models import Account, AccountBalance, Security, SecurityPricing
from finstore.services.snapshots import upsert_account_balances, upsert_security_prices


def _balances(session: Session, account_id: int) -> list[tuple[date, Decimal]]:
    stmt = (
        select(AccountBalance.date, AccountBalance.balance)
        .where(AccountBalance.account_id == account_id)
        .order_by(AccountBalance.date)
    )
    return [tuple(row) for row in session.execute(stmt)]


def test_resync_overwrites_existing_dates(session: Session, linked_account: Account) -> None:
    written = upsert_account_balances(
        session,
        linked_account.id,
        {date(2024, 1, 1): Decimal("100"), date(2024, 1, 2): Decimal("110")},
    )
    assert written == 2

    upsert_account_balances(
        session,
        linked_account.id,
        [(date(2024, 1, 2), Decimal("115")), (date(2024, 1, 3), Decimal("120"))],
    )

    assert _balances(session, linked_account.id) == [
        (date(2024, 1, 1), Decimal("100")),
        (date(2024, 1, 2), Decimal("115")),
        (date(2024, 1, 3), Decimal("120")),
    ]


def test_last_value_for_a_date_wins_within_a_batch(
    session: Session, linked_account: Account
) -> None:
    written = upsert_account_balances(
        session,
        linked_account.id,
        [(date(2024, 1, 1), Decimal("1")), (date(2024, 1, 1), Decimal("2"))],
    )

    assert written == 1
    assert _balances(session, linked_account.id) == [(date(2024, 1, 1), Decimal("2"))]


def test_empty_batch_writes_nothing(session: Session, linked_account: Account) -> None:
    assert upsert_account_balances(session, linked_account.id, {}) == 0
    assert _balances(session, linked_account.id) == []


def test_loaded_rows_see_the_overwritten_value(session: Session, linked_account: Account) -> None:
    upsert_account_balances(session, linked_account.id, {date(2024, 1, 1): Decimal("1")})
    row = session.get(AccountBalance, (linked_account.id, date(2024, 1, 1)))
    assert row.balance == Decimal("1")

    upsert_account_balances(session, linked_account.id, {date(2024, 1, 1): Decimal("5")})

    assert row.balance == Decimal("5")


def test_security_price_upsert(session: Session) -> None:
    security = Security(name="Index Fund", symbol="IDX")
    session.add(security)
    session.flush()

    upsert_security_prices(session, security.id, {date(2024, 1, 1): Decimal("10.5")})
    upsert_security_prices(
        session, security.id, {date(2024, 1, 1): Decimal("11.25")}, source="close"
    )

    rows = session.scalars(select(SecurityPricing)).all()
    assert len(rows) == 1
    assert rows[0].price_close == Decimal("11.25")
    assert rows[0].source == "close"
