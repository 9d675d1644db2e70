"""SQLModel implementation of the claim repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlalchemy import and_, func, or_
from sqlmodel import Session, col, select

from ...domain.repositories.claim import ClaimFilter, ClaimSummary
from ...models.location_claim import LocationClaim
from ...models.rating import Rating
from ...services.ratings import round_average


class SQLModelClaimRepository:
    """SQLModel-based claim repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, claim_id: int) -> Optional[LocationClaim]:
        """Retrieve a claim by ID, active or not."""
        with self.session_factory() as session:
            obj = session.get(LocationClaim, claim_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_active(self, filters: ClaimFilter | None = None) -> list[ClaimSummary]:
        """List active claims joined with rating count and mean score."""
        filters = filters or ClaimFilter()
        statement = (
            select(LocationClaim, func.count(Rating.id), func.avg(Rating.score))
            .outerjoin(
                Rating,
                and_(Rating.claim_id == LocationClaim.id, Rating.active()),
            )
            .where(LocationClaim.active())
            .group_by(LocationClaim.id)
            .order_by(col(LocationClaim.created_at).desc(), col(LocationClaim.id).desc())
        )
        if filters.owner_id is not None:
            statement = statement.where(LocationClaim.owner_id == filters.owner_id)
        if filters.text:
            pattern = f"%{filters.text.strip()}%"
            statement = statement.where(
                or_(
                    col(LocationClaim.name).ilike(pattern),
                    col(LocationClaim.location).ilike(pattern),
                )
            )

        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
        return [
            ClaimSummary(
                claim=claim,
                rating_count=int(count or 0),
                rating_average=round_average(average),
            )
            for claim, count, average in rows
        ]
