"""Concrete repository implementations using SQLModel."""

from .account import SQLModelAccountRepository
from .claim import SQLModelClaimRepository
from .event_code import SQLModelEventCodeRepository
from .project import SQLModelProjectRepository
from .rating import SQLModelRatingRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelClaimRepository",
    "SQLModelEventCodeRepository",
    "SQLModelProjectRepository",
    "SQLModelRatingRepository",
]
