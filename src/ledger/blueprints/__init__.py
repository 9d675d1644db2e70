"""Blueprint exports."""

from . import admin, auth, claims, codes, projects, ratings

__all__ = [
    "admin",
    "auth",
    "claims",
    "codes",
    "projects",
    "ratings",
]
