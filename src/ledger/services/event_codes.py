"""Event Code Issuer/Verifier.

A claim has at most one active code. Issuing supersedes the previous one in
the same transaction, and redeeming binds a rating to exactly one code and
rater. Expiry is evaluated at redemption time: an active code past its
``expires_at`` is treated exactly like a deactivated one.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ..config import MAX_CODE_DIGITS, MIN_CODE_DIGITS
from ..domain.repositories.event_code import ActiveCode, EventCodeRepository
from ..errors import (
    AccountNotFound,
    ClaimNotFound,
    CodeNotFound,
    DuplicateRating,
    InvalidOrExpiredCode,
    NotClaimOwner,
    ScoreOutOfRange,
    SelfRatingForbidden,
)
from ..identity import Identity
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.account import Account
from ..models.event_code import EventCode
from ..models.lifecycle import as_utc, utcnow
from ..models.location_claim import LocationClaim
from ..models.rating import MAX_SCORE, MIN_SCORE, Rating

logger = get_logger(__name__)

DEFAULT_CODE_DIGITS = MIN_CODE_DIGITS
DEFAULT_CODE_TTL = timedelta(hours=24)
MAX_GENERATION_ATTEMPTS = 10

CodeGenerator = Callable[[int], str]


def generate_code(digits: int = DEFAULT_CODE_DIGITS) -> str:
    """Uniform random numeric code, zero-padded to ``digits``."""

    if not MIN_CODE_DIGITS <= digits <= MAX_CODE_DIGITS:
        raise ValueError(f"Codes need {MIN_CODE_DIGITS} to {MAX_CODE_DIGITS} digits")
    return str(secrets.randbelow(10**digits)).zfill(digits)


@dataclass(frozen=True)
class IssuedCode:
    """A freshly issued code handed back to the claim owner."""

    id: int
    claim_id: int
    code: str
    expires_at: datetime


@dataclass(frozen=True)
class RedemptionReceipt:
    """Confirmation returned to the rater."""

    rating_id: int
    claim_id: int
    claim_name: str
    location: str
    score: int


def _code_in_use(session: Session, code: str) -> bool:
    statement = select(EventCode.id).where(EventCode.code == code, EventCode.active())
    return session.exec(statement).first() is not None


def issue_code(
    *,
    identity: Identity,
    claim_id: int,
    session_factory: SessionFactory,
    digits: int = DEFAULT_CODE_DIGITS,
    ttl: timedelta = DEFAULT_CODE_TTL,
    now: datetime | None = None,
    generator: CodeGenerator = generate_code,
) -> IssuedCode:
    """Supersede any live code for the claim and issue a new one."""

    at = now or utcnow()
    with session_factory() as session:
        claim = session.exec(
            select(LocationClaim).where(LocationClaim.id == claim_id).with_for_update()
        ).first()
        if claim is None or not claim.is_active:
            raise ClaimNotFound(f"Claim {claim_id} is not active")
        if claim.owner_id != identity.account_id:
            raise NotClaimOwner("Only the claim owner can issue codes")

        superseded = 0
        previous = session.exec(
            select(EventCode).where(EventCode.claim_id == claim_id, EventCode.active())
        ).all()
        for old in previous:
            if old.deactivate(at=at):
                session.add(old)
                superseded += 1
        # The partial index on claim_id needs the old row switched off first.
        session.flush()

        for _ in range(MAX_GENERATION_ATTEMPTS):
            value = generator(digits)
            if not _code_in_use(session, value):
                break
        else:
            raise RuntimeError("Could not generate an unused event code")

        code = EventCode(claim_id=claim_id, code=value, expires_at=at + ttl, created_at=at)
        session.add(code)
        session.commit()
        session.refresh(code)
        issued = IssuedCode(
            id=code.id,
            claim_id=code.claim_id,
            code=code.code,
            expires_at=as_utc(code.expires_at),
        )

    logger.info(
        "Event code issued",
        extra={"claim_id": claim_id, "code_id": issued.id, "superseded": superseded},
    )
    return issued


def _find_code(session: Session, value: str) -> Optional[EventCode]:
    """Prefer the live row for a code value, then the most recent one."""

    statement = (
        select(EventCode)
        .where(EventCode.code == value)
        .order_by(col(EventCode.is_active).desc(), col(EventCode.created_at).desc())
    )
    return session.exec(statement).first()


def redeem_code(
    *,
    identity: Identity,
    code: str,
    score: int,
    session_factory: SessionFactory,
    comment: Optional[str] = None,
    now: datetime | None = None,
) -> RedemptionReceipt:
    """Record one rating against a live code.

    Checks run in this order: score range, code validity, self-rating,
    duplicate. A dead code is reported as invalid whoever presents it.
    """

    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise ScoreOutOfRange(score, MIN_SCORE, MAX_SCORE)
    at = now or utcnow()
    value = (code or "").strip()
    rater_id = identity.account_id

    with session_factory() as session:
        event_code = _find_code(session, value) if value else None
        if event_code is None:
            logger.info("Redemption rejected: unknown code", extra={"rater_id": rater_id})
            raise InvalidOrExpiredCode()
        claim = session.get(LocationClaim, event_code.claim_id)
        if claim is None or not claim.is_active or not event_code.is_redeemable(at):
            logger.info(
                "Redemption rejected: code not redeemable",
                extra={"rater_id": rater_id, "code_id": event_code.id},
            )
            raise InvalidOrExpiredCode()
        if claim.owner_id == rater_id:
            raise SelfRatingForbidden()

        rater = session.get(Account, rater_id)
        if rater is None or not rater.is_active:
            raise AccountNotFound()

        existing = session.exec(
            select(Rating.id).where(
                Rating.event_code_id == event_code.id, Rating.rater_id == rater_id
            )
        ).first()
        if existing is not None:
            raise DuplicateRating()

        rating = Rating(
            rater_id=rater_id,
            claim_id=claim.id,
            event_code_id=event_code.id,
            score=score,
            comment=(comment or "").strip() or None,
            created_at=at,
        )
        session.add(rating)
        try:
            session.flush()
        except IntegrityError as exc:
            session.rollback()
            raise DuplicateRating() from exc
        session.commit()
        receipt = RedemptionReceipt(
            rating_id=rating.id,
            claim_id=claim.id,
            claim_name=claim.name,
            location=claim.location,
            score=score,
        )

    logger.info(
        "Rating recorded",
        extra={"rating_id": receipt.rating_id, "claim_id": receipt.claim_id, "rater_id": rater_id},
    )
    return receipt


def end_code(
    *,
    identity: Identity,
    code_id: int,
    session_factory: SessionFactory,
    now: datetime | None = None,
) -> EventCode:
    """Deactivate a single code before it expires."""

    with session_factory() as session:
        event_code = session.get(EventCode, code_id)
        if event_code is None or not event_code.is_active:
            raise CodeNotFound(f"Code {code_id} not found")
        claim = session.get(LocationClaim, event_code.claim_id)
        if claim is None or (claim.owner_id != identity.account_id and not identity.is_admin):
            raise NotClaimOwner("Not authorized to end this code")
        event_code.deactivate(at=now)
        session.add(event_code)
        session.commit()
        session.refresh(event_code)
        session.expunge(event_code)

    logger.info("Event code ended", extra={"code_id": code_id, "claim_id": event_code.claim_id})
    return event_code


def list_active_codes(
    repo: EventCodeRepository, identity: Identity, *, now: datetime | None = None
) -> list[ActiveCode]:
    """The caller's redeemable codes with their rating counts."""

    return repo.list_active_for_owner(identity.account_id, now=now or utcnow())


def sweep_expired_codes(
    *, session_factory: SessionFactory, now: datetime | None = None
) -> int:
    """Switch off codes whose expiry has passed; return how many changed.

    Redemption never depends on this having run.
    """

    at = now or utcnow()
    with session_factory() as session:
        expired = session.exec(
            select(EventCode).where(EventCode.active(), EventCode.expires_at <= at)
        ).all()
        for event_code in expired:
            event_code.deactivate(at=at)
            session.add(event_code)
        session.commit()
        count = len(expired)

    if count:
        logger.info("Expired event codes swept", extra={"count": count})
    return count


__all__ = [
    "CodeGenerator",
    "DEFAULT_CODE_DIGITS",
    "DEFAULT_CODE_TTL",
    "IssuedCode",
    "RedemptionReceipt",
    "end_code",
    "generate_code",
    "issue_code",
    "list_active_codes",
    "redeem_code",
    "sweep_expired_codes",
]
