"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

MIN_CODE_DIGITS = 6
MAX_CODE_DIGITS = 12


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a whole number, got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be greater than zero")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Ledger"
    DB_FILENAME = "ledger.db"
    SQLITE_PRAGMAS = {"foreign_keys": "on"}

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("LEDGER_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("LEDGER_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("LEDGER_DATABASE_URL", self._build_sqlite_url())
        self.DB_TIMEOUT = _env_int("LEDGER_DB_TIMEOUT", 30)
        self.CODE_TTL_HOURS = _env_int("LEDGER_CODE_TTL_HOURS", 24)
        self.CODE_DIGITS = _env_int("LEDGER_CODE_DIGITS", MIN_CODE_DIGITS)
        if not MIN_CODE_DIGITS <= self.CODE_DIGITS <= MAX_CODE_DIGITS:
            raise ValueError(
                f"LEDGER_CODE_DIGITS must be between {MIN_CODE_DIGITS} and {MAX_CODE_DIGITS}"
            )
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("LEDGER_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("LEDGER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.is_sqlite:
            return {"pool_pre_ping": True}
        connect_args: dict[str, Any] = {
            "check_same_thread": False,
            "timeout": self.DB_TIMEOUT,
        }
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False
