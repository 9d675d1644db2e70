"""Ratings submitted by redeeming an event code."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from .lifecycle import Lifecycle, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .account import Account
    from .event_code import EventCode
    from .location_claim import LocationClaim

MIN_SCORE = 1
MAX_SCORE = 5


class Rating(Lifecycle, table=True):
    """One rater's feedback for one redeemed code."""

    __tablename__: ClassVar[str] = "rating"
    __table_args__ = (
        UniqueConstraint("event_code_id", "rater_id", name="uq_rating_code_rater"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    rater_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    claim_id: int = Field(foreign_key="location_claim.id", nullable=False, index=True)
    event_code_id: int = Field(foreign_key="event_code.id", nullable=False, index=True)
    score: int = Field(nullable=False)
    comment: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    rater: "Account" = Relationship(
        sa_relationship=relationship("Account", back_populates="ratings")
    )
    claim: "LocationClaim" = Relationship(
        sa_relationship=relationship("LocationClaim", back_populates="ratings")
    )
    event_code: "EventCode" = Relationship(
        sa_relationship=relationship("EventCode", back_populates="ratings")
    )
