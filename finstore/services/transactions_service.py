"""Transfer-match bookkeeping for transactions.

Matching itself happens outside this package; only its result is stored. A
transaction points at no more than one canonical match, and nothing requires
the counterpart to point back.
"""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from finstore.core.logger import get_logger
from finstore.domain.errors import InvariantViolation, NotFoundError
from finstore.models import Transaction
from finstore.schemas.summaries import TransactionSummary

LOGGER = get_logger(__name__)


class TransactionsService:
    def _get(self, session: Session, transaction_id: int) -> Transaction:
        transaction = session.get(Transaction, transaction_id)
        if transaction is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return transaction

    def record_match(self, session: Session, transaction_id: int, match_id: int) -> Transaction:
        if transaction_id == match_id:
            raise InvariantViolation("A transaction cannot match itself")

        transaction = self._get(session, transaction_id)
        transaction.match = self._get(session, match_id)
        session.flush()
        LOGGER.debug("Transaction %s matched to %s", transaction_id, match_id)
        return transaction

    def clear_match(self, session: Session, transaction_id: int) -> Transaction:
        transaction = self._get(session, transaction_id)
        transaction.match = None
        session.flush()
        return transaction

    def list_matched_by(self, session: Session, transaction_id: int) -> list[TransactionSummary]:
        """Transactions whose canonical match is ``transaction_id``."""

        stmt = (
            select(Transaction)
            .where(Transaction.match_id == transaction_id)
            .order_by(Transaction.id)
        )
        return [TransactionSummary.model_validate(row) for row in session.scalars(stmt)]
