"""Short-lived verification codes proving an event happened at a claim."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import Index, text
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from ..config import MAX_CODE_DIGITS
from .lifecycle import Lifecycle, as_utc, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .location_claim import LocationClaim
    from .rating import Rating


class EventCode(Lifecycle, table=True):
    """Numeric code bound to one claim.

    Deactivated codes were superseded or ended. An active code past
    ``expires_at`` is expired and redeems exactly like an inactive one.
    """

    __tablename__: ClassVar[str] = "event_code"
    __table_args__ = (
        Index(
            "uq_event_code_active_claim",
            "claim_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index(
            "uq_event_code_active_code",
            "code",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    claim_id: int = Field(foreign_key="location_claim.id", nullable=False, index=True)
    code: str = Field(nullable=False, max_length=MAX_CODE_DIGITS, index=True)
    expires_at: datetime = Field(nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    claim: "LocationClaim" = Relationship(
        sa_relationship=relationship("LocationClaim", back_populates="codes")
    )
    ratings: list["Rating"] = Relationship(
        back_populates="event_code",
        sa_relationship=relationship("Rating", back_populates="event_code"),
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        return as_utc(self.expires_at) <= (now or utcnow())

    def is_redeemable(self, now: datetime | None = None) -> bool:
        return self.is_active and not self.is_expired(now)
