"""Recording of connection state reported by the sync collaborator.

Transitions are recorded as given. Their legality is the sync job's concern.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from finstore.core.logger import get_logger
from finstore.domain.enums import AccountConnectionType, ConnectionStatus, SyncStatus
from finstore.domain.errors import NotFoundError
from finstore.models import Account, AccountConnection

LOGGER = get_logger(__name__)


class ConnectionsService:
    def _get(self, session: Session, connection_id: int) -> AccountConnection:
        connection = session.get(AccountConnection, connection_id)
        if connection is None:
            msg = f"Connection {connection_id} not found"
            LOGGER.warning(msg)
            raise NotFoundError(msg)
        return connection

    def record_status(
        self,
        session: Session,
        connection_id: int,
        status: ConnectionStatus,
        *,
        error: dict[str, Any] | None = None,
    ) -> AccountConnection:
        """Store a new status and the provider error payload that came with it.

        The error is written to the field of the connection's own provider and
        cleared when the status returns to OK.
        """

        connection = self._get(session, connection_id)
        previous = connection.status
        connection.status = status

        error_field = (
            "plaid_error"
            if AccountConnectionType(connection.type) is AccountConnectionType.PLAID
            else "teller_error"
        )
        setattr(connection, error_field, None if status is ConnectionStatus.OK else error)

        session.flush()
        LOGGER.info(
            "Connection %s status %s -> %s",
            connection_id,
            getattr(previous, "value", previous),
            status.value,
        )
        return connection

    def record_sync_status(
        self,
        session: Session,
        connection_id: int,
        sync_status: SyncStatus,
        *,
        include_accounts: bool = True,
    ) -> AccountConnection:
        connection = self._get(session, connection_id)
        connection.sync_status = sync_status
        if include_accounts:
            for account in connection.accounts:
                account.sync_status = sync_status
        session.flush()
        LOGGER.debug("Connection %s sync status %s", connection_id, sync_status.value)
        return connection

    def list_accounts(self, session: Session, connection_id: int) -> list[Account]:
        stmt = (
            select(Account)
            .where(Account.account_connection_id == connection_id)
            .order_by(Account.id)
        )
        return list(session.scalars(stmt))
