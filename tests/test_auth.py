"""Account registration, login and administration."""

from __future__ import annotations

import pytest
from sqlmodel import select

from ledger.errors import (
    AccountAlreadyExists,
    AccountNotFound,
    LocationAlreadyClaimed,
    PermissionDenied,
    ValidationFailed,
)
from ledger.forms.claims import ClaimInput
from ledger.models import Account, EventCode, LocationClaim
from ledger.services import auth as auth_service
from ledger.services import event_codes as code_service


def _register(session_factory, **overrides):
    values = {
        "name": "Pat Rater",
        "email": "pat@example.org",
        "password": "correct horse",
        "role": "user",
    }
    values.update(overrides)
    return auth_service.register_account(session_factory=session_factory, **values)


def test_register_hashes_password(session_factory):
    account, claim = _register(session_factory, email="  Pat@Example.org ")

    assert claim is None
    assert account.email == "pat@example.org"
    assert account.role == "user"
    assert account.password_hash != "correct horse"
    assert account.password_hash.startswith("$argon2")


def test_register_duplicate_email(session_factory):
    _register(session_factory)

    with pytest.raises(AccountAlreadyExists):
        _register(session_factory, email="PAT@example.org")


def test_register_refuses_admin_role(session_factory):
    with pytest.raises(ValidationFailed):
        _register(session_factory, role="admin")


def test_organization_signup_claims_location(session_factory):
    account, claim = _register(
        session_factory,
        email="org@example.org",
        role="organization",
        claim=ClaimInput(name="Helping Hands", location="Springfield"),
    )

    assert account.role == "organization"
    assert claim is not None
    assert claim.owner_id == account.id
    assert claim.location == "Springfield"


def test_signup_rolls_back_when_location_is_held(session_factory, org_a, claim_factory):
    claim_factory(org_a, "Springfield")

    with pytest.raises(LocationAlreadyClaimed):
        _register(
            session_factory,
            email="late@example.org",
            role="organization",
            claim=ClaimInput(name="Latecomers", location="Springfield"),
        )

    with session_factory() as session:
        assert session.exec(select(Account).where(Account.email == "late@example.org")).first() is None


def test_user_signup_cannot_claim(session_factory):
    with pytest.raises(PermissionDenied):
        _register(session_factory, claim=ClaimInput(name="Nope", location="Springfield"))


def test_authenticate(session_factory):
    _register(session_factory)

    account = auth_service.authenticate(
        email="PAT@example.org", password="correct horse", session_factory=session_factory
    )
    assert account is not None
    assert account.last_login is not None

    assert (
        auth_service.authenticate(
            email="pat@example.org", password="wrong", session_factory=session_factory
        )
        is None
    )
    assert (
        auth_service.authenticate(
            email="nobody@example.org", password="correct horse", session_factory=session_factory
        )
        is None
    )


def test_list_accounts_requires_admin(admin, rater, org_a, account_repo):
    accounts, stats = auth_service.list_accounts(account_repo, admin)

    assert len(accounts) == 3
    assert stats.total == 3
    assert stats.by_role == {"user": 1, "organization": 1, "admin": 1}

    with pytest.raises(PermissionDenied):
        auth_service.list_accounts(account_repo, rater)


def test_set_role(admin, rater, session_factory, account_repo):
    updated = auth_service.set_role(
        identity=admin, account_id=rater.account_id, role="organization", session_factory=session_factory
    )
    assert updated.role == "organization"
    assert auth_service.get_account(account_repo, rater.account_id).role == "organization"

    with pytest.raises(PermissionDenied):
        auth_service.set_role(
            identity=rater, account_id=admin.account_id, role="user", session_factory=session_factory
        )
    with pytest.raises(ValidationFailed):
        auth_service.set_role(
            identity=admin, account_id=rater.account_id, role="owner", session_factory=session_factory
        )
    with pytest.raises(AccountNotFound):
        auth_service.set_role(
            identity=admin, account_id=9999, role="user", session_factory=session_factory
        )


def test_deactivate_account_releases_claims(admin, org_a, claim_factory, session_factory):
    claim = claim_factory(org_a, "Springfield")
    code_service.issue_code(identity=org_a, claim_id=claim.id, session_factory=session_factory)

    account = auth_service.deactivate_account(
        identity=admin, account_id=org_a.account_id, session_factory=session_factory
    )

    assert account.is_active is False
    with session_factory() as session:
        assert session.get(LocationClaim, claim.id).is_active is False
        codes = session.exec(select(EventCode).where(EventCode.claim_id == claim.id)).all()
        assert all(code.is_active is False for code in codes)


def test_deactivated_account_cannot_log_in(admin, session_factory):
    account, _ = _register(session_factory)
    auth_service.deactivate_account(
        identity=admin, account_id=account.id, session_factory=session_factory
    )

    assert (
        auth_service.authenticate(
            email="pat@example.org", password="correct horse", session_factory=session_factory
        )
        is None
    )


def test_admin_cannot_deactivate_self(admin, session_factory):
    with pytest.raises(PermissionDenied):
        auth_service.deactivate_account(
            identity=admin, account_id=admin.account_id, session_factory=session_factory
        )


def test_ensure_admin_creates_then_promotes(session_factory):
    created = auth_service.ensure_admin(
        email="root@example.org", password="s3cret-pass", session_factory=session_factory
    )
    assert created.role == "admin"

    again = auth_service.ensure_admin(
        email="root@example.org", password="new-pass-123", session_factory=session_factory
    )
    assert again.id == created.id
    assert auth_service.authenticate(
        email="root@example.org", password="new-pass-123", session_factory=session_factory
    )
