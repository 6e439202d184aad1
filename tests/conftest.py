"""Shared fixtures: an in-memory SQLite database with the full schema."""
from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from finstore.db import create_schema, create_sync_engine
from finstore.models import (
    Account,
    AccountConnection,
    AccountConnectionType,
    AccountType,
    User,
)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_sync_engine("sqlite:///:memory:", echo=False)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    """Provide an in-memory database session for each test."""

    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    with SessionLocal() as session:
        yield session


@pytest.fixture()
def user(session: Session) -> User:
    user = User(
        auth_id="auth-alice", email="Alice@Example.com", first_name="Alice", last_name="Example"
    )
    session.add(user)
    session.flush()
    return user


@pytest.fixture()
def plaid_connection(session: Session, user: User) -> AccountConnection:
    connection = AccountConnection(
        user_id=user.id,
        name="Chase",
        type=AccountConnectionType.PLAID,
        plaid_item_id="item-1",
        plaid_access_token="access-sandbox-1",
    )
    session.add(connection)
    session.flush()
    return connection


@pytest.fixture()
def linked_account(session: Session, plaid_connection: AccountConnection) -> Account:
    account = Account(
        account_connection_id=plaid_connection.id,
        name="Checking",
        type=AccountType.DEPOSITORY,
        plaid_account_id="acc-1",
        category_provider="cash",
        subcategory_provider="checking",
    )
    session.add(account)
    session.flush()
    return account
