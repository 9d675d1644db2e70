"""Claim Manager: exclusive, revocable holds on location strings.

For any location string at most one claim is active at a time. The
existence check below gives a precise error in the common case; the partial
unique index on ``location_claim(location) WHERE is_active`` is what keeps
two concurrent claimants from both committing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..domain.repositories.claim import ClaimFilter, ClaimRepository, ClaimSummary
from ..errors import (
    AccountNotFound,
    ClaimNotFound,
    LocationAlreadyClaimed,
    NotClaimOwner,
    PermissionDenied,
    ValidationFailed,
)
from ..identity import Identity
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.account import Account
from ..models.event_code import EventCode
from ..models.lifecycle import utcnow
from ..models.location_claim import LocationClaim

logger = get_logger(__name__)


def normalize_location(location: str | None) -> str:
    """Trim and collapse whitespace; matching is otherwise exact."""

    return " ".join((location or "").split())


def _active_claim_id(session: Session, location: str) -> Optional[int]:
    statement = (
        select(LocationClaim.id)
        .where(LocationClaim.location == location, LocationClaim.active())
        .with_for_update()
    )
    return session.exec(statement).first()


def insert_claim(
    session: Session,
    *,
    owner_id: int,
    name: str,
    location: str,
    contact_number: Optional[str] = None,
    description: Optional[str] = None,
) -> LocationClaim:
    """Insert an active claim inside the caller's transaction.

    Raises ``LocationAlreadyClaimed`` without writing when the location is
    held. The caller owns commit.
    """

    if _active_claim_id(session, location) is not None:
        logger.info("Claim rejected: location already held", extra={"owner_id": owner_id})
        raise LocationAlreadyClaimed(location)

    claim = LocationClaim(
        owner_id=owner_id,
        name=name,
        location=location,
        contact_number=contact_number or None,
        description=description or None,
    )
    session.add(claim)
    try:
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        if _active_claim_id(session, location) is None:
            raise
        logger.info("Claim lost race for location", extra={"owner_id": owner_id})
        raise LocationAlreadyClaimed(location) from exc
    return claim


def claim_location(
    *,
    identity: Identity,
    name: str,
    location: str,
    session_factory: SessionFactory,
    contact_number: Optional[str] = None,
    description: Optional[str] = None,
) -> LocationClaim:
    """Claim an unclaimed (or previously released) location for an organization."""

    if not identity.is_organization:
        raise PermissionDenied("Only organization accounts can claim locations")
    location = normalize_location(location)
    name = (name or "").strip()
    errors: dict[str, list[str]] = {}
    if not location:
        errors["location"] = ["Location is required."]
    if not name:
        errors["name"] = ["Name is required."]
    if errors:
        raise ValidationFailed(errors)

    with session_factory() as session:
        owner = session.get(Account, identity.account_id)
        if owner is None or not owner.is_active:
            raise AccountNotFound()
        claim = insert_claim(
            session,
            owner_id=identity.account_id,
            name=name,
            location=location,
            contact_number=contact_number,
            description=description,
        )
        session.commit()
        session.refresh(claim)
        session.expunge(claim)

    logger.info(
        "Location claimed",
        extra={"claim_id": claim.id, "owner_id": claim.owner_id},
    )
    return claim


def deactivate_claim(session: Session, claim: LocationClaim, *, at: datetime) -> int:
    """Release a claim and every live code it issued; return codes closed."""

    claim.deactivate(at=at)
    session.add(claim)
    closed = 0
    codes = session.exec(
        select(EventCode).where(EventCode.claim_id == claim.id, EventCode.active())
    ).all()
    for code in codes:
        if code.deactivate(at=at):
            session.add(code)
            closed += 1
    return closed


def _lock_claim(session: Session, claim_id: int) -> Optional[LocationClaim]:
    statement = select(LocationClaim).where(LocationClaim.id == claim_id).with_for_update()
    return session.exec(statement).first()


def release_location(
    *,
    identity: Identity,
    claim_id: int,
    session_factory: SessionFactory,
    now: datetime | None = None,
) -> LocationClaim:
    """End a claim; the owner or an administrator may do this.

    Releasing an already released claim raises ``ClaimNotFound``.
    """

    at = now or utcnow()
    with session_factory() as session:
        claim = _lock_claim(session, claim_id)
        if claim is None:
            raise ClaimNotFound(f"Claim {claim_id} not found")
        if claim.owner_id != identity.account_id and not identity.is_admin:
            raise NotClaimOwner("Not authorized to end this location")
        if not claim.is_active:
            raise ClaimNotFound(f"Claim {claim_id} is already released")
        closed = deactivate_claim(session, claim, at=at)
        session.commit()
        session.refresh(claim)
        session.expunge(claim)

    logger.info(
        "Location released",
        extra={
            "claim_id": claim.id,
            "released_by": identity.account_id,
            "codes_closed": closed,
        },
    )
    return claim


def list_active_claims(
    repo: ClaimRepository, filters: ClaimFilter | None = None
) -> list[ClaimSummary]:
    """All live claims with rating count and mean score."""

    return repo.list_active(filters)


def list_owner_claims(repo: ClaimRepository, owner_id: int) -> list[ClaimSummary]:
    """The owner's live claims with rating statistics."""

    return repo.list_active(ClaimFilter(owner_id=owner_id))


def get_claim(repo: ClaimRepository, claim_id: int) -> LocationClaim:
    claim = repo.get_by_id(claim_id)
    if claim is None:
        raise ClaimNotFound(f"Claim {claim_id} not found")
    return claim


def update_claim_details(
    *,
    identity: Identity,
    claim_id: int,
    changes: Mapping[str, Optional[str]],
    session_factory: SessionFactory,
) -> LocationClaim:
    """Edit description/contact number of a live claim (owner or admin)."""

    allowed = {"description", "contact_number"}
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationFailed({field: ["Field cannot be changed."] for field in sorted(unknown)})

    with session_factory() as session:
        claim = _lock_claim(session, claim_id)
        if claim is None or not claim.is_active:
            raise ClaimNotFound(f"Claim {claim_id} not found")
        if claim.owner_id != identity.account_id and not identity.is_admin:
            raise NotClaimOwner("You can only edit your own organization")
        for field, value in changes.items():
            setattr(claim, field, value or None)
        session.add(claim)
        session.commit()
        session.refresh(claim)
        session.expunge(claim)

    logger.info("Claim details updated", extra={"claim_id": claim.id, "fields": sorted(changes)})
    return claim


__all__ = [
    "ClaimFilter",
    "ClaimSummary",
    "claim_location",
    "deactivate_claim",
    "get_claim",
    "insert_claim",
    "list_active_claims",
    "list_owner_claims",
    "normalize_location",
    "release_location",
    "update_claim_details",
]
