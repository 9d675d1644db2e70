"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import (
    SessionFactory,
    create_db_engine,
    create_session_factory,
    dispose_engine,
    init_database,
)
from .infra.repositories import (
    SQLModelAccountRepository,
    SQLModelClaimRepository,
    SQLModelEventCodeRepository,
    SQLModelProjectRepository,
    SQLModelRatingRepository,
)


@dataclass
class AppContext:
    """Store handle and repositories built once per process."""

    # Configuration
    config: BaseConfig

    # Store
    engine: Engine
    session_factory: SessionFactory

    # Repositories
    account_repo: SQLModelAccountRepository
    claim_repo: SQLModelClaimRepository
    code_repo: SQLModelEventCodeRepository
    rating_repo: SQLModelRatingRepository
    project_repo: SQLModelProjectRepository

    @property
    def code_ttl(self) -> timedelta:
        return timedelta(hours=self.config.CODE_TTL_HOURS)

    @property
    def code_digits(self) -> int:
        return self.config.CODE_DIGITS

    def close(self) -> None:
        """Release the engine's pooled connections."""

        dispose_engine(self.engine)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        account_repo=SQLModelAccountRepository(session_factory),
        claim_repo=SQLModelClaimRepository(session_factory),
        code_repo=SQLModelEventCodeRepository(session_factory),
        rating_repo=SQLModelRatingRepository(session_factory),
        project_repo=SQLModelProjectRepository(session_factory),
    )
