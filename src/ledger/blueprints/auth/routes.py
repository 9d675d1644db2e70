"""Signup and credential check routes.

Token issuance belongs to the upstream authenticator; login only confirms
the credentials and reports the identity it should forward.
"""

from __future__ import annotations

from flask import jsonify

from ...forms.accounts import LoginForm, SignupForm
from ...services import auth as auth_service
from ..common import bind, created, get_context
from ..serializers import account_to_dict, claim_to_dict
from . import bp


@bp.post("/signup")
def signup():
    data = bind(SignupForm)
    ctx = get_context()
    account, claim = auth_service.register_account(
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        organization=data.organization,
        claim=data.claim,
        session_factory=ctx.session_factory,
    )
    return created(
        {
            "account": account_to_dict(account),
            "claim": claim_to_dict(claim) if claim is not None else None,
        }
    )


@bp.post("/login")
def login():
    data = bind(LoginForm)
    ctx = get_context()
    account = auth_service.authenticate(
        email=data.email,
        password=data.password,
        session_factory=ctx.session_factory,
    )
    if account is None:
        return jsonify({"error": "invalid_credentials", "message": "Invalid email or password"}), 401
    return jsonify(
        {
            "account": account_to_dict(account),
            "identity": {"account_id": account.id, "role": account.role},
        }
    )
