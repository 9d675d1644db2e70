"""JSON shapes returned by the blueprints."""

from __future__ import annotations

from typing import Any, Optional

from ..domain.repositories.claim import ClaimSummary
from ..domain.repositories.event_code import ActiveCode
from ..models.account import Account
from ..models.event_code import EventCode
from ..models.location_claim import LocationClaim
from ..models.project import Project, Task
from ..models.rating import Rating
from ..services.auth import AccountStats
from ..services.event_codes import IssuedCode, RedemptionReceipt
from ..services.ratings import RatingStats
from .common import iso


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "email": account.email,
        "name": account.name,
        "organization": account.organization,
        "role": account.role,
        "is_active": account.is_active,
        "created_at": iso(account.created_at),
        "last_login": iso(account.last_login),
    }


def account_stats_to_dict(stats: AccountStats) -> dict[str, Any]:
    return {"total": stats.total, "active": stats.active, "by_role": stats.by_role}


def claim_to_dict(claim: LocationClaim, summary: Optional[ClaimSummary] = None) -> dict[str, Any]:
    payload = {
        "id": claim.id,
        "owner_id": claim.owner_id,
        "name": claim.name,
        "location": claim.location,
        "contact_number": claim.contact_number,
        "description": claim.description,
        "is_active": claim.is_active,
        "created_at": iso(claim.created_at),
        "deactivated_at": iso(claim.deactivated_at),
    }
    if summary is not None:
        payload["rating_count"] = summary.rating_count
        payload["rating_average"] = summary.rating_average
    return payload


def summary_to_dict(summary: ClaimSummary) -> dict[str, Any]:
    return claim_to_dict(summary.claim, summary)


def issued_code_to_dict(issued: IssuedCode) -> dict[str, Any]:
    return {
        "id": issued.id,
        "claim_id": issued.claim_id,
        "code": issued.code,
        "expires_at": iso(issued.expires_at),
    }


def event_code_to_dict(code: EventCode) -> dict[str, Any]:
    return {
        "id": code.id,
        "claim_id": code.claim_id,
        "code": code.code,
        "is_active": code.is_active,
        "expired": code.is_expired(),
        "expires_at": iso(code.expires_at),
        "created_at": iso(code.created_at),
    }


def active_code_to_dict(active: ActiveCode) -> dict[str, Any]:
    payload = event_code_to_dict(active.code)
    payload["claim_name"] = active.claim.name
    payload["location"] = active.claim.location
    payload["rating_count"] = active.rating_count
    return payload


def receipt_to_dict(receipt: RedemptionReceipt) -> dict[str, Any]:
    return {
        "rating_id": receipt.rating_id,
        "claim_id": receipt.claim_id,
        "claim_name": receipt.claim_name,
        "location": receipt.location,
        "score": receipt.score,
    }


def rating_to_dict(rating: Rating) -> dict[str, Any]:
    return {
        "id": rating.id,
        "rater_id": rating.rater_id,
        "claim_id": rating.claim_id,
        "event_code_id": rating.event_code_id,
        "score": rating.score,
        "comment": rating.comment,
        "created_at": iso(rating.created_at),
    }


def rating_stats_to_dict(stats: RatingStats) -> dict[str, Any]:
    return {"count": stats.count, "average": stats.average}


def project_to_dict(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "owner_id": project.owner_id,
        "title": project.title,
        "description": project.description,
        "is_public": project.is_public,
        "status": project.status,
        "start_date": iso(project.start_date),
        "end_date": iso(project.end_date),
        "is_active": project.is_active,
        "created_at": iso(project.created_at),
    }


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "project_id": task.project_id,
        "assignee_id": task.assignee_id,
        "title": task.title,
        "description": task.description,
        "template_url": task.template_url,
        "status": task.status,
        "priority": task.priority,
        "is_active": task.is_active,
        "created_at": iso(task.created_at),
    }
