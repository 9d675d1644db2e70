"""Shared active/inactive lifecycle for every persisted entity.

Nothing in Ledger is physically deleted: records are switched off with
``deactivate`` and stay behind as audit history.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a stored timestamp to aware UTC.

    SQLite hands datetimes back without tzinfo; they were written as UTC.
    """

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Lifecycle(SQLModel):
    """Mixin adding the logical-deletion flag and its timestamp."""

    is_active: bool = Field(default=True, nullable=False)
    deactivated_at: Optional[datetime] = Field(default=None)

    def deactivate(self, *, at: datetime | None = None) -> bool:
        """Mark the record inactive; return False when it already was."""

        if not self.is_active:
            return False
        self.is_active = False
        self.deactivated_at = at or utcnow()
        return True

    @classmethod
    def active(cls):
        """SQL criterion selecting live rows of a table model."""

        return cls.is_active == True  # noqa: E712
