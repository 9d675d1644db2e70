"""SQLModel implementation of the account repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlmodel import Session, col, select

from ...models.account import Account


class SQLModelAccountRepository:
    """SQLModel-based account repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, account_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        with self.session_factory() as session:
            obj = session.get(Account, account_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_email(self, email: str) -> Optional[Account]:
        """Retrieve an account by email."""
        with self.session_factory() as session:
            statement = select(Account).where(Account.email == email.strip().lower())
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, include_inactive: bool = False) -> list[Account]:
        """List accounts, newest first."""
        with self.session_factory() as session:
            statement = select(Account).order_by(
                col(Account.created_at).desc(), col(Account.id).desc()
            )
            if not include_inactive:
                statement = statement.where(Account.active())
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
