"""Projects blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint(
    "projects",
    __name__,
)

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
