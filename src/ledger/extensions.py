"""Store and error-handler wiring for the Flask boundary."""

from __future__ import annotations

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import LedgerError, StoreUnavailable
from .logging_config import get_logger

logger = get_logger(__name__)

EXTENSION_KEY = "ledger"


def init_context(app: Flask, config: BaseConfig) -> AppContext:
    """Build the process-wide context and attach it to the app."""

    ctx = create_app_context(config)
    app.extensions[EXTENSION_KEY] = ctx
    return ctx


def get_context() -> AppContext:
    """Return the context of the current Flask app."""

    ctx = current_app.extensions.get(EXTENSION_KEY)
    if ctx is None:  # pragma: no cover - app factory always sets it
        raise RuntimeError("Ledger context not initialized")
    return ctx


def register_error_handlers(app: Flask) -> None:
    """Render errors as JSON bodies with a stable ``error`` code."""

    @app.errorhandler(LedgerError)
    def _ledger_error(exc: LedgerError):
        if isinstance(exc, StoreUnavailable):
            # Details were logged where the session failed.
            return jsonify({"error": exc.code, "message": exc.default_message}), exc.status
        return jsonify(exc.to_dict()), exc.status

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        name = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": name, "message": exc.description}), exc.code or 500

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.error("Unhandled error", exc_info=exc)
        return jsonify({"error": "internal_error", "message": "Internal server error"}), 500
