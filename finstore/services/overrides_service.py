"""Apply user overrides and refresh the effective columns they feed."""
from __future__ import annotations

from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finstore.core.logger import get_logger
from finstore.domain.errors import NotFoundError
from finstore.models import Account, Holding, Transaction, User, refresh_derived
from finstore.schemas.overrides import (
    AccountOverrides,
    HoldingOverrides,
    TransactionOverrides,
    OverridePayload,
    UserOverrides,
)

LOGGER = get_logger(__name__)

M = TypeVar("M")


class OverridesService:
    """Writes the user-owned side of three-tier fields."""

    def _apply(
        self, session: Session, model: type[M], row_id: int, payload: OverridePayload
    ) -> M:
        row = session.get(model, row_id)
        if row is None:
            msg = f"{model.__name__} {row_id} not found"
            LOGGER.warning(msg)
            raise NotFoundError(msg)

        changes = payload.changes()
        for field, value in changes.items():
            setattr(row, field, value)
        refresh_derived(row)

        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            LOGGER.exception("Override rejected for %s %s", model.__name__, row_id)
            raise

        LOGGER.debug(
            "Applied overrides to %s %s", model.__name__, row_id, extra={"fields": sorted(changes)}
        )
        return row

    def update_account(
        self, session: Session, account_id: int, payload: AccountOverrides
    ) -> Account:
        return self._apply(session, Account, account_id, payload)

    def update_transaction(
        self, session: Session, transaction_id: int, payload: TransactionOverrides
    ) -> Transaction:
        return self._apply(session, Transaction, transaction_id, payload)

    def update_holding(
        self, session: Session, holding_id: int, payload: HoldingOverrides
    ) -> Holding:
        return self._apply(session, Holding, holding_id, payload)

    def update_user(self, session: Session, user_id: int, payload: UserOverrides) -> User:
        return self._apply(session, User, user_id, payload)
