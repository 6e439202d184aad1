"""Manual accounts and net-worth aggregation."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from finstore.core.logger import get_logger
from finstore.domain.enums import AccountClassification, AccountType, BalanceStrategy
from finstore.domain.errors import NotFoundError
from finstore.models import Account, AccountConnection, User
from finstore.schemas.summaries import AccountSummary, NetWorthSummary

LOGGER = get_logger(__name__)


class AccountsService:
    """Reads and writes accounts on behalf of the user-facing layer."""

    def create_manual_account(
        self,
        session: Session,
        user_id: int,
        *,
        name: str,
        account_type: AccountType,
        balance: Decimal | None = None,
        currency_code: str = "USD",
        category: str | None = None,
    ) -> Account:
        """Create an account owned directly by a user.

        The entered balance is stored as the user override so the effective
        balance follows the ``current`` strategy.
        """

        if session.get(User, user_id) is None:
            raise NotFoundError(f"User {user_id} not found")

        account = Account(
            user_id=user_id,
            name=name.strip(),
            type=account_type,
            currency_code=currency_code,
            category_user=category,
            current_balance_user=balance,
            current_balance_strategy=BalanceStrategy.CURRENT,
            available_balance_strategy=BalanceStrategy.AVAILABLE,
        )
        session.add(account)
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            LOGGER.exception("Manual account creation failed for user %s", user_id)
            raise
        LOGGER.info("Created manual account %s for user %s", account.id, user_id)
        return account

    def list_accounts(self, session: Session, user_id: int, *, active_only: bool = True) -> list[Account]:
        """Manual accounts of the user plus the accounts of their connections."""

        stmt = (
            select(Account)
            .outerjoin(AccountConnection, Account.account_connection_id == AccountConnection.id)
            .where(or_(Account.user_id == user_id, AccountConnection.user_id == user_id))
            .order_by(Account.id)
        )
        if active_only:
            stmt = stmt.where(Account.is_active.is_(True))
        return list(session.scalars(stmt))

    def get_net_worth(self, session: Session, user_id: int) -> NetWorthSummary:
        """Total assets minus total liabilities across the user's accounts."""

        accounts = self.list_accounts(session, user_id)
        assets = Decimal("0")
        liabilities = Decimal("0")
        for account in accounts:
            balance = account.current_balance or Decimal("0")
            if account.classification == AccountClassification.LIABILITY:
                liabilities += balance
            else:
                assets += balance

        LOGGER.debug(
            "Net worth for user %s computed over %d accounts", user_id, len(accounts)
        )
        return NetWorthSummary(
            assets=assets,
            liabilities=liabilities,
            net_worth=assets - liabilities,
            accounts=[AccountSummary.model_validate(account) for account in accounts],
        )
