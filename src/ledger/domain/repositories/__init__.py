"""Repository protocol definitions for domain layer."""

from .account import AccountRepository
from .claim import ClaimFilter, ClaimRepository, ClaimSummary
from .event_code import ActiveCode, EventCodeRepository
from .project import ProjectRepository, TaskFilter
from .rating import RatingRepository

__all__ = [
    "AccountRepository",
    "ActiveCode",
    "ClaimFilter",
    "ClaimRepository",
    "ClaimSummary",
    "EventCodeRepository",
    "ProjectRepository",
    "RatingRepository",
    "TaskFilter",
]
