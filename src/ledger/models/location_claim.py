"""An organization's exclusive hold on one location string."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import Index, text
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from .lifecycle import Lifecycle, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .account import Account
    from .event_code import EventCode
    from .rating import Rating


class LocationClaim(Lifecycle, table=True):
    """Claim row; at most one active row per location."""

    __tablename__: ClassVar[str] = "location_claim"
    __table_args__ = (
        # Closes the race between the existence check and the insert.
        Index(
            "uq_location_claim_active_location",
            "location",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    location: str = Field(nullable=False, max_length=255, index=True)
    contact_number: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    owner: "Account" = Relationship(
        sa_relationship=relationship("Account", back_populates="claims")
    )
    codes: list["EventCode"] = Relationship(
        back_populates="claim",
        sa_relationship=relationship("EventCode", back_populates="claim"),
    )
    ratings: list["Rating"] = Relationship(
        back_populates="claim",
        sa_relationship=relationship("Rating", back_populates="claim"),
    )
