"""Ledger application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from .config import BaseConfig, DevConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "ledger.blueprints.auth"
    yield "ledger.blueprints.claims"
    yield "ledger.blueprints.codes"
    yield "ledger.blueprints.ratings"
    yield "ledger.blueprints.admin"
    yield "ledger.blueprints.projects"


def create_app(config_name: str | None = None, config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["LEDGER_CONFIG"] = config_obj

    # Imported lazily so that importing ``ledger`` does not pull in the models.
    from . import cli
    from .extensions import init_context, register_error_handlers
    from .logging_config import setup_logging

    setup_logging(config_obj)
    init_context(app, config_obj)
    register_error_handlers(app)
    _register_blueprints(app)
    cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "create_app"]
