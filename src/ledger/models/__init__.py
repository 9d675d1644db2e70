"""SQLModel table exports."""

from .account import ROLE_ADMIN, ROLE_ORGANIZATION, ROLE_USER, ROLES, SIGNUP_ROLES, Account
from .event_code import EventCode
from .lifecycle import Lifecycle, as_utc, utcnow
from .location_claim import LocationClaim
from .project import PROJECT_STATUSES, TASK_PRIORITIES, TASK_STATUSES, Project, Task
from .rating import MAX_SCORE, MIN_SCORE, Rating

__all__ = [
    "Account",
    "EventCode",
    "Lifecycle",
    "LocationClaim",
    "Project",
    "Rating",
    "Task",
    "MAX_SCORE",
    "MIN_SCORE",
    "PROJECT_STATUSES",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_ORGANIZATION",
    "ROLE_USER",
    "SIGNUP_ROLES",
    "TASK_PRIORITIES",
    "TASK_STATUSES",
    "as_utc",
    "utcnow",
]
