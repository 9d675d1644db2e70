"""Account model supporting authentication and roles."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from .lifecycle import Lifecycle, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .location_claim import LocationClaim
    from .rating import Rating

ROLE_USER = "user"
ROLE_ORGANIZATION = "organization"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ORGANIZATION, ROLE_ADMIN)
SIGNUP_ROLES = (ROLE_USER, ROLE_ORGANIZATION)


class Account(Lifecycle, table=True):
    """Identity with credentials and a role fixed at signup."""

    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    name: str = Field(nullable=False, max_length=128)
    organization: Optional[str] = Field(default=None, max_length=128)
    password_hash: str = Field(nullable=False, max_length=255)
    role: str = Field(default=ROLE_USER, nullable=False, max_length=16, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    last_login: Optional[datetime] = Field(default=None)

    claims: list["LocationClaim"] = Relationship(
        back_populates="owner",
        sa_relationship=relationship("LocationClaim", back_populates="owner"),
    )
    ratings: list["Rating"] = Relationship(
        back_populates="rater",
        sa_relationship=relationship("Rating", back_populates="rater"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
