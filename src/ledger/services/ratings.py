"""Rating listings and aggregate statistics."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..domain.repositories.rating import RatingRepository
from ..models.rating import Rating


@dataclass(frozen=True)
class RatingStats:
    count: int
    average: float


def round_average(value: Optional[float]) -> float:
    """Round a mean score half-up to one decimal; no ratings yields 0.0."""

    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def summarize(scores: Iterable[int]) -> RatingStats:
    """Return count and rounded mean for a collection of scores."""

    values = list(scores)
    if not values:
        return RatingStats(count=0, average=0.0)
    return RatingStats(count=len(values), average=round_average(sum(values) / len(values)))


def list_ratings(repo: RatingRepository, claim_id: int) -> tuple[list[Rating], RatingStats]:
    """Ratings for a claim, newest first, with their statistics."""

    ratings = repo.list_for_claim(claim_id)
    return ratings, summarize(r.score for r in ratings)


__all__ = ["RatingStats", "list_ratings", "round_average", "summarize"]
