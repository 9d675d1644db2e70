"""Redemption and rating listing routes."""

from __future__ import annotations

from flask import jsonify

from ...forms.claims import RedeemForm
from ...services import claims as claim_service
from ...services import event_codes as code_service
from ...services import ratings as rating_service
from ..common import bind, created, current_identity, get_context
from ..serializers import rating_stats_to_dict, rating_to_dict, receipt_to_dict
from . import bp


@bp.post("/ratings")
def redeem():
    """Redeem an event code and record the caller's rating."""

    identity = current_identity()
    data = bind(RedeemForm)
    receipt = code_service.redeem_code(
        identity=identity,
        code=data.code,
        score=data.score,
        comment=data.comment,
        session_factory=get_context().session_factory,
    )
    return created({"rating": receipt_to_dict(receipt)})


@bp.get("/ratings/mine")
def my_ratings():
    identity = current_identity()
    ratings = get_context().rating_repo.list_for_rater(identity.account_id)
    return jsonify({"ratings": [rating_to_dict(r) for r in ratings]})


@bp.get("/claims/<int:claim_id>/ratings")
def claim_ratings(claim_id: int):
    ctx = get_context()
    claim_service.get_claim(ctx.claim_repo, claim_id)
    ratings, stats = rating_service.list_ratings(ctx.rating_repo, claim_id)
    return jsonify(
        {
            "ratings": [rating_to_dict(r) for r in ratings],
            "stats": rating_stats_to_dict(stats),
        }
    )
