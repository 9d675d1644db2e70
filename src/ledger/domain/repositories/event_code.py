"""Event code repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from ...models.event_code import EventCode
from ...models.location_claim import LocationClaim


@dataclass(frozen=True)
class ActiveCode:
    """A redeemable code with the claim it belongs to."""

    code: EventCode
    claim: LocationClaim
    rating_count: int


class EventCodeRepository(Protocol):
    """Read access to event codes."""

    def list_for_claim(self, claim_id: int) -> list[EventCode]:
        """All codes ever issued for a claim, newest first."""
        ...

    def list_active_for_owner(self, owner_id: int, *, now: datetime) -> list[ActiveCode]:
        """Unexpired active codes across the owner's claims."""
        ...
