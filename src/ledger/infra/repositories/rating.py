"""SQLModel implementation of the rating repository."""

from __future__ import annotations

from typing import Callable, ContextManager

from sqlmodel import Session, col, select

from ...models.rating import Rating


class SQLModelRatingRepository:
    """SQLModel-based rating repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _list(self, *criteria) -> list[Rating]:
        with self.session_factory() as session:
            statement = (
                select(Rating)
                .where(Rating.active(), *criteria)
                .order_by(col(Rating.created_at).desc(), col(Rating.id).desc())
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_for_claim(self, claim_id: int) -> list[Rating]:
        """Ratings for a claim, newest first."""
        return self._list(Rating.claim_id == claim_id)

    def list_for_rater(self, rater_id: int) -> list[Rating]:
        """Ratings a given account has submitted."""
        return self._list(Rating.rater_id == rater_id)
