"""Service module exports."""

from . import auth, claims, event_codes, projects, ratings

__all__ = ["auth", "claims", "event_codes", "projects", "ratings"]
