"""Event code issuance and management routes."""

from __future__ import annotations

from flask import jsonify

from ...errors import NotClaimOwner
from ...forms.claims import IssueCodeForm
from ...services import claims as claim_service
from ...services import event_codes as code_service
from ..common import bind, created, current_identity, get_context
from ..serializers import active_code_to_dict, event_code_to_dict, issued_code_to_dict
from . import bp


def _issue(identity, claim_id: int):
    ctx = get_context()
    issued = code_service.issue_code(
        identity=identity,
        claim_id=claim_id,
        digits=ctx.code_digits,
        ttl=ctx.code_ttl,
        session_factory=ctx.session_factory,
    )
    return created({"code": issued_code_to_dict(issued)})


@bp.post("/claims/<int:claim_id>/codes")
def issue_code(claim_id: int):
    return _issue(current_identity(), claim_id)


@bp.post("/codes")
def issue_code_for_body():
    """Issue a code for the claim named in the request body."""

    identity = current_identity()
    data = bind(IssueCodeForm)
    return _issue(identity, data.claim_id)


@bp.get("/claims/<int:claim_id>/codes")
def code_history(claim_id: int):
    """Every code issued for a claim, newest first; owner or admin only."""

    identity = current_identity()
    ctx = get_context()
    claim = claim_service.get_claim(ctx.claim_repo, claim_id)
    if claim.owner_id != identity.account_id and not identity.is_admin:
        raise NotClaimOwner("Only the claim owner can view its codes")
    codes = ctx.code_repo.list_for_claim(claim_id)
    return jsonify({"codes": [event_code_to_dict(code) for code in codes]})


@bp.get("/codes")
def active_codes():
    identity = current_identity()
    codes = code_service.list_active_codes(get_context().code_repo, identity)
    return jsonify({"codes": [active_code_to_dict(code) for code in codes]})


@bp.delete("/codes/<int:code_id>")
def end_code(code_id: int):
    identity = current_identity()
    code = code_service.end_code(
        identity=identity,
        code_id=code_id,
        session_factory=get_context().session_factory,
    )
    return jsonify({"code": event_code_to_dict(code)})
