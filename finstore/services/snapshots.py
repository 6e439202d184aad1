"""Daily snapshot writers for account balances and security prices.

Snapshots are keyed by their natural key (``account_id``/``security_id`` plus
``date``). Re-syncing a date that already exists overwrites the row.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import Table, func
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from finstore.core.logger import get_logger, timeit
from finstore.models import AccountBalance, SecurityPricing

LOGGER = get_logger(__name__)


def _upsert(
    session: Session,
    table: Table,
    rows: Sequence[Mapping[str, Any]],
    key_columns: Sequence[str],
    update_columns: Sequence[str],
) -> None:
    dialect = session.get_bind().dialect.name

    if dialect in {"sqlite", "postgresql"}:
        insert = sqlite_insert if dialect == "sqlite" else postgresql_insert
        stmt = insert(table).values(list(rows))
        updates = {name: stmt.excluded[name] for name in update_columns}
        updates["updated_at"] = func.current_timestamp()
        stmt = stmt.on_conflict_do_update(index_elements=list(key_columns), set_=updates)
        session.execute(stmt)
        return

    if dialect in {"mysql", "mariadb"}:
        stmt = mysql_insert(table).values(list(rows))
        updates = {name: stmt.inserted[name] for name in update_columns}
        updates["updated_at"] = func.current_timestamp()
        session.execute(stmt.on_duplicate_key_update(**updates))
        return

    LOGGER.debug("No native upsert for dialect %s, merging row by row", dialect)
    model = AccountBalance if table is AccountBalance.__table__ else SecurityPricing
    for row in rows:
        session.merge(model(**row))


def _expire_cached(session: Session, model: type) -> None:
    # Core upserts bypass the identity map; drop any stale copies.
    for obj in list(session.identity_map.values()):
        if isinstance(obj, model):
            session.expire(obj)


def upsert_account_balances(
    session: Session,
    account_id: int,
    balances: Mapping[date, Decimal] | Iterable[tuple[date, Decimal]],
) -> int:
    """Write daily balances for an account, overwriting existing dates."""

    items = balances.items() if isinstance(balances, Mapping) else balances
    # The last value given for a date wins, as it would across two syncs.
    by_day = {day: Decimal(balance) for day, balance in items}
    rows = [
        {"account_id": account_id, "date": day, "balance": balance}
        for day, balance in by_day.items()
    ]
    if not rows:
        return 0

    session.flush()
    with timeit("Account balance upsert", logger=LOGGER, total=len(rows)):
        _upsert(session, AccountBalance.__table__, rows, ("account_id", "date"), ("balance",))
    _expire_cached(session, AccountBalance)
    return len(rows)


def upsert_security_prices(
    session: Session,
    security_id: int,
    prices: Mapping[date, Decimal] | Iterable[tuple[date, Decimal]],
    *,
    source: str | None = None,
) -> int:
    """Write daily close prices for a security, overwriting existing dates."""

    items = prices.items() if isinstance(prices, Mapping) else prices
    by_day = {day: Decimal(price) for day, price in items}
    rows = [
        {"security_id": security_id, "date": day, "price_close": price, "source": source}
        for day, price in by_day.items()
    ]
    if not rows:
        return 0

    session.flush()
    with timeit("Security price upsert", logger=LOGGER, unit="prices", total=len(rows)):
        _upsert(
            session,
            SecurityPricing.__table__,
            rows,
            ("security_id", "date"),
            ("price_close", "source"),
        )
    _expire_cached(session, SecurityPricing)
    return len(rows)
