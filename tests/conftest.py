"""Pytest configuration and shared fixtures for Ledger tests.

Every test gets its own file-backed SQLite database under ``tmp_path`` so the
connection-level settings (foreign keys, BEGIN IMMEDIATE) behave exactly as
they do in production, including across threads.
"""

from __future__ import annotations

import pytest

from ledger.config import BaseConfig
from ledger.identity import Identity
from ledger.infra.database import create_db_engine, create_session_factory, init_database
from ledger.infra.repositories import (
    SQLModelAccountRepository,
    SQLModelClaimRepository,
    SQLModelEventCodeRepository,
    SQLModelProjectRepository,
    SQLModelRatingRepository,
)
from ledger.models import ROLE_ADMIN, ROLE_ORGANIZATION, ROLE_USER, Account
from ledger.services import claims as claim_service

# =============================================================================
# Configuration & Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> BaseConfig:
    """Configuration pointing at a throwaway data directory."""

    monkeypatch.setenv("LEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("LEDGER_DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.setenv("LEDGER_DEV_MODE", "true")
    for name in (
        "LEDGER_CODE_TTL_HOURS",
        "LEDGER_CODE_DIGITS",
        "LEDGER_DB_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    return BaseConfig()


@pytest.fixture(scope="function")
def db_engine(config):
    """Engine with the full schema, disposed after the test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    engine = create_db_engine(config)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory, as the services receive in production."""

    return create_session_factory(db_engine)


@pytest.fixture
def claim_repo(session_factory):
    return SQLModelClaimRepository(session_factory)


@pytest.fixture
def code_repo(session_factory):
    return SQLModelEventCodeRepository(session_factory)


@pytest.fixture
def rating_repo(session_factory):
    return SQLModelRatingRepository(session_factory)


@pytest.fixture
def account_repo(session_factory):
    return SQLModelAccountRepository(session_factory)


@pytest.fixture
def project_repo(session_factory):
    return SQLModelProjectRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


def identity_for(account: Account) -> Identity:
    """Identity the upstream authenticator would forward for an account."""

    return Identity(account_id=account.id, role=account.role)


@pytest.fixture
def account_factory(session_factory):
    """Factory for persisted accounts.

    The password hash is a placeholder; tests that log in go through
    ``register_account`` instead.
    """

    counter = {"n": 0}

    def _create_account(
        role: str = ROLE_USER,
        name: str | None = None,
        email: str | None = None,
    ) -> Account:
        counter["n"] += 1
        n = counter["n"]
        with session_factory() as session:
            account = Account(
                email=email or f"{role}{n}@example.org",
                name=name or f"{role.title()} {n}",
                password_hash="dummy-hash",
                role=role,
            )
            session.add(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
        return account

    return _create_account


@pytest.fixture
def org_a(account_factory) -> Identity:
    return identity_for(account_factory(ROLE_ORGANIZATION, name="Org A"))


@pytest.fixture
def org_b(account_factory) -> Identity:
    return identity_for(account_factory(ROLE_ORGANIZATION, name="Org B"))


@pytest.fixture
def rater(account_factory) -> Identity:
    return identity_for(account_factory(ROLE_USER, name="Rater X"))


@pytest.fixture
def admin(account_factory) -> Identity:
    return identity_for(account_factory(ROLE_ADMIN, name="Admin"))


@pytest.fixture
def claim_factory(session_factory):
    """Factory claiming a location through the Claim Manager."""

    def _claim(identity: Identity, location: str = "Springfield", name: str = "Org A"):
        return claim_service.claim_location(
            identity=identity,
            name=name,
            location=location,
            session_factory=session_factory,
        )

    return _claim
