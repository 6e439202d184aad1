"""User lookups, including the loose link to the auth collaborator's records."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from finstore.models import AuthUser, User


class UsersService:
    def get_by_auth_id(self, session: Session, auth_id: str) -> User | None:
        return session.scalars(select(User).where(User.auth_id == auth_id)).one_or_none()

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Find a user by email, ignoring case."""

        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        return session.scalars(stmt).one_or_none()

    def get_auth_user(self, session: Session, user_id: int) -> AuthUser | None:
        """Resolve the auth record of a user by joining on the stored identifier."""

        stmt = (
            select(AuthUser)
            .join(User, User.auth_id == AuthUser.id)
            .where(User.id == user_id)
        )
        return session.scalars(stmt).one_or_none()
