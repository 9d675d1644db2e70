"""Location claim routes."""

from __future__ import annotations

from flask import jsonify, request

from ...domain.repositories.claim import ClaimFilter
from ...errors import PermissionDenied
from ...forms.claims import ClaimForm, ClaimUpdateForm
from ...services import claims as claim_service
from ..common import bind, created, current_identity, get_context
from ..serializers import claim_to_dict, summary_to_dict
from . import bp


@bp.get("")
def list_claims():
    """Every live claim with rating statistics; open to any caller."""

    owner_id = request.args.get("owner_id", type=int)
    text = (request.args.get("q") or "").strip() or None
    summaries = claim_service.list_active_claims(
        get_context().claim_repo, ClaimFilter(owner_id=owner_id, text=text)
    )
    return jsonify({"claims": [summary_to_dict(s) for s in summaries]})


@bp.get("/mine")
def my_claims():
    identity = current_identity()
    if not identity.is_organization:
        raise PermissionDenied("Only organization accounts hold claims")
    summaries = claim_service.list_owner_claims(get_context().claim_repo, identity.account_id)
    return jsonify({"claims": [summary_to_dict(s) for s in summaries]})


@bp.post("")
def create_claim():
    identity = current_identity()
    data = bind(ClaimForm)
    claim = claim_service.claim_location(
        identity=identity,
        name=data.name,
        location=data.location,
        contact_number=data.contact_number,
        description=data.description,
        session_factory=get_context().session_factory,
    )
    return created({"claim": claim_to_dict(claim)})


@bp.get("/<int:claim_id>")
def claim_detail(claim_id: int):
    claim = claim_service.get_claim(get_context().claim_repo, claim_id)
    return jsonify({"claim": claim_to_dict(claim)})


@bp.patch("/<int:claim_id>")
def update_claim(claim_id: int):
    identity = current_identity()
    data = bind(ClaimUpdateForm)
    claim = claim_service.update_claim_details(
        identity=identity,
        claim_id=claim_id,
        changes=data.changes(),
        session_factory=get_context().session_factory,
    )
    return jsonify({"claim": claim_to_dict(claim)})


@bp.delete("/<int:claim_id>")
def release_claim(claim_id: int):
    """End a claim; its event codes stop working with it."""

    identity = current_identity()
    claim = claim_service.release_location(
        identity=identity,
        claim_id=claim_id,
        session_factory=get_context().session_factory,
    )
    return jsonify({"claim": claim_to_dict(claim)})
