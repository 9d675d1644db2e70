"""Account registration, credential checks and administration."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ..domain.repositories.account import AccountRepository
from ..errors import (
    AccountAlreadyExists,
    AccountNotFound,
    PermissionDenied,
    ValidationFailed,
)
from ..forms.claims import ClaimInput
from ..identity import Identity
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.account import (
    ROLE_ADMIN,
    ROLE_ORGANIZATION,
    ROLE_USER,
    ROLES,
    SIGNUP_ROLES,
    Account,
)
from ..models.lifecycle import utcnow
from ..models.location_claim import LocationClaim
from .claims import deactivate_claim, insert_claim, normalize_location

logger = get_logger(__name__)

_hasher = PasswordHasher()


@dataclass(frozen=True)
class AccountStats:
    total: int
    active: int
    by_role: dict[str, int]


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _normalize_role(role: str, allowed: tuple[str, ...]) -> str:
    role = (role or ROLE_USER).strip().lower()
    if role not in allowed:
        raise ValidationFailed({"role": [f"Must be one of: {', '.join(allowed)}."]})
    return role


def _require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        raise PermissionDenied("Administrator role required")


def register_account(
    *,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
    session_factory: SessionFactory,
    organization: Optional[str] = None,
    claim: Optional[ClaimInput] = None,
) -> tuple[Account, Optional[LocationClaim]]:
    """Create an account; an organization may claim its first location too.

    Both rows commit together. A held location fails the whole signup with
    ``LocationAlreadyClaimed``.
    """

    normalized_role = _normalize_role(role, SIGNUP_ROLES)
    email = _normalize_email(email)
    if claim is not None and normalized_role != ROLE_ORGANIZATION:
        raise PermissionDenied("Only organization accounts can claim locations")
    password_hash = _hasher.hash(password)

    with session_factory() as session:
        existing = session.exec(select(Account.id).where(Account.email == email)).first()
        if existing is not None:
            raise AccountAlreadyExists()
        account = Account(
            email=email,
            name=name.strip(),
            organization=(organization or "").strip() or None,
            password_hash=password_hash,
            role=normalized_role,
        )
        session.add(account)
        try:
            session.flush()
        except IntegrityError as exc:
            session.rollback()
            raise AccountAlreadyExists() from exc

        created_claim = None
        if claim is not None:
            created_claim = insert_claim(
                session,
                owner_id=account.id,
                name=claim.name.strip(),
                location=normalize_location(claim.location),
                contact_number=claim.contact_number,
                description=claim.description,
            )
        session.commit()
        session.refresh(account)
        session.expunge(account)
        if created_claim is not None:
            session.refresh(created_claim)
            session.expunge(created_claim)

    logger.info(
        "Account registered",
        extra={
            "account_id": account.id,
            "role": account.role,
            "claim_id": created_claim.id if created_claim else None,
        },
    )
    return account, created_claim


def authenticate(
    *,
    email: str,
    password: str,
    session_factory: SessionFactory,
) -> Optional[Account]:
    """Validate credentials and return the account when correct."""

    email = _normalize_email(email)
    if not email:
        return None
    with session_factory() as session:
        account = session.exec(select(Account).where(Account.email == email)).first()
        if account is None or not account.is_active:
            return None
        try:
            _hasher.verify(account.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            logger.info("Login rejected", extra={"account_id": account.id})
            return None

        if _hasher.check_needs_rehash(account.password_hash):
            account.password_hash = _hasher.hash(password)
        account.last_login = utcnow()
        session.add(account)
        session.commit()
        session.refresh(account)
        session.expunge(account)
        return account


def get_account(repo: AccountRepository, account_id: int) -> Account:
    account = repo.get_by_id(account_id)
    if account is None:
        raise AccountNotFound()
    return account


def list_accounts(
    repo: AccountRepository, identity: Identity, *, include_inactive: bool = True
) -> tuple[list[Account], AccountStats]:
    """All accounts for the admin console, with role counts."""

    _require_admin(identity)
    accounts = repo.list_all(include_inactive=include_inactive)
    active = [a for a in accounts if a.is_active]
    by_role = Counter(a.role for a in active)
    stats = AccountStats(
        total=len(accounts),
        active=len(active),
        by_role={role: by_role.get(role, 0) for role in ROLES},
    )
    return accounts, stats


def set_role(
    *,
    identity: Identity,
    account_id: int,
    role: str,
    session_factory: SessionFactory,
) -> Account:
    """Change an account's role; administrators only."""

    _require_admin(identity)
    normalized_role = _normalize_role(role, ROLES)
    with session_factory() as session:
        account = session.get(Account, account_id)
        if account is None or not account.is_active:
            raise AccountNotFound()
        previous = account.role
        account.role = normalized_role
        session.add(account)
        session.commit()
        session.refresh(account)
        session.expunge(account)

    logger.info(
        "Account role changed",
        extra={
            "account_id": account_id,
            "from_role": previous,
            "to_role": normalized_role,
            "changed_by": identity.account_id,
        },
    )
    return account


def deactivate_account(
    *,
    identity: Identity,
    account_id: int,
    session_factory: SessionFactory,
) -> Account:
    """Switch an account off and release every location it holds."""

    _require_admin(identity)
    if account_id == identity.account_id:
        raise PermissionDenied("Administrators cannot deactivate themselves")
    at = utcnow()
    with session_factory() as session:
        account = session.get(Account, account_id)
        if account is None or not account.is_active:
            raise AccountNotFound()
        account.deactivate(at=at)
        session.add(account)
        claims = session.exec(
            select(LocationClaim).where(
                LocationClaim.owner_id == account_id, LocationClaim.active()
            )
        ).all()
        for claim in claims:
            deactivate_claim(session, claim, at=at)
        session.commit()
        session.refresh(account)
        session.expunge(account)

    logger.info(
        "Account deactivated",
        extra={
            "account_id": account_id,
            "claims_released": len(claims),
            "deactivated_by": identity.account_id,
        },
    )
    return account


def ensure_admin(
    *,
    email: str,
    password: str,
    session_factory: SessionFactory,
    name: str = "Administrator",
) -> Account:
    """Create or promote the administrator used to bootstrap a deployment."""

    email = _normalize_email(email)
    with session_factory() as session:
        account = session.exec(select(Account).where(Account.email == email)).first()
        if account is None:
            account = Account(
                email=email,
                name=name,
                password_hash=_hasher.hash(password),
                role=ROLE_ADMIN,
            )
        else:
            account.role = ROLE_ADMIN
            account.is_active = True
            account.deactivated_at = None
            account.password_hash = _hasher.hash(password)
        session.add(account)
        session.commit()
        session.refresh(account)
        session.expunge(account)

    logger.info("Administrator ensured", extra={"account_id": account.id})
    return account


__all__ = [
    "AccountStats",
    "authenticate",
    "deactivate_account",
    "ensure_admin",
    "get_account",
    "list_accounts",
    "register_account",
    "set_role",
]
