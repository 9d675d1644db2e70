"""Rating repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.rating import Rating


class RatingRepository(Protocol):
    """Read access to ratings."""

    def list_for_claim(self, claim_id: int) -> list[Rating]:
        """Ratings for a claim, newest first."""
        ...

    def list_for_rater(self, rater_id: int) -> list[Rating]:
        """Ratings a given account has submitted."""
        ...
