"""Location claim repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ...models.location_claim import LocationClaim


@dataclass(frozen=True)
class ClaimFilter:
    """Filters applied to active-claim listings."""

    owner_id: Optional[int] = None
    text: Optional[str] = None


@dataclass(frozen=True)
class ClaimSummary:
    """An active claim with its aggregate rating statistics."""

    claim: LocationClaim
    rating_count: int
    rating_average: float


class ClaimRepository(Protocol):
    """Read access to location claims."""

    def get_by_id(self, claim_id: int) -> Optional[LocationClaim]:
        """Retrieve a claim by ID, active or not."""
        ...

    def list_active(self, filters: ClaimFilter | None = None) -> list[ClaimSummary]:
        """List active claims joined with rating count and mean score."""
        ...
