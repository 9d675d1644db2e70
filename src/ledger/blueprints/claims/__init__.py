"""Claims blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint(
    "claims",
    __name__,
    url_prefix="/claims",
)

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
