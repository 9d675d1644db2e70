"""Database infrastructure: engine, schema, and transactional sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Mapping

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..errors import StoreUnavailable
from ..logging_config import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]

_STORE_ERRORS = (OperationalError, InterfaceError, DisconnectionError)


def _configure_sqlite(engine: Engine, pragmas: Mapping[str, str]) -> None:
    """Apply pragmas and take the write lock when each transaction begins.

    pysqlite defers BEGIN until the first write, which lets two sessions run
    the same existence check concurrently. BEGIN IMMEDIATE serializes them.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # pragma: no cover - driver hook
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        for name, value in pragmas.items():
            cursor.execute(f"PRAGMA {name}={value}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection) -> None:  # pragma: no cover - driver hook
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine, config.SQLITE_PRAGMAS)
    return engine


def init_database(engine: Engine) -> None:
    """Create all tables and indexes."""
    # Import all models to ensure they're registered
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Provide a transactional scope around operations."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except _STORE_ERRORS as exc:
        session.rollback()
        logger.error("Store unavailable", exc_info=True)
        raise StoreUnavailable() from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_session_factory(engine: Engine) -> SessionFactory:
    """Create a session factory function."""

    def factory() -> ContextManager[Session]:
        """Create a new transactional session."""
        return session_scope(engine)

    return factory


def dispose_engine(engine: Engine) -> None:
    """Release pooled connections at process shutdown."""

    engine.dispose()
    logger.info("Database engine disposed", extra={"url": str(engine.url)})
