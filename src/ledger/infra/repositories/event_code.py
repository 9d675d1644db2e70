"""SQLModel implementation of the event code repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, ContextManager

from sqlalchemy import and_, func
from sqlmodel import Session, col, select

from ...domain.repositories.event_code import ActiveCode
from ...models.event_code import EventCode
from ...models.location_claim import LocationClaim
from ...models.rating import Rating


class SQLModelEventCodeRepository:
    """SQLModel-based event code repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_for_claim(self, claim_id: int) -> list[EventCode]:
        """All codes ever issued for a claim, newest first."""
        with self.session_factory() as session:
            statement = (
                select(EventCode)
                .where(EventCode.claim_id == claim_id)
                .order_by(col(EventCode.created_at).desc(), col(EventCode.id).desc())
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active_for_owner(self, owner_id: int, *, now: datetime) -> list[ActiveCode]:
        """Unexpired active codes across the owner's claims."""
        statement = (
            select(EventCode, LocationClaim, func.count(Rating.id))
            .join(LocationClaim, LocationClaim.id == EventCode.claim_id)
            .outerjoin(Rating, and_(Rating.event_code_id == EventCode.id, Rating.active()))
            .where(
                LocationClaim.owner_id == owner_id,
                LocationClaim.active(),
                EventCode.active(),
                EventCode.expires_at > now,
            )
            .group_by(EventCode.id, LocationClaim.id)
            .order_by(col(EventCode.created_at).desc())
        )
        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
        return [
            ActiveCode(code=code, claim=claim, rating_count=int(count or 0))
            for code, claim, count in rows
        ]
