"""Admin routes for Ledger."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import PermissionDenied
from ...forms.accounts import RoleForm
from ...services import auth as auth_service
from ...services import event_codes as code_service
from ..common import bind, current_identity, get_context
from ..serializers import account_stats_to_dict, account_to_dict
from . import bp


@bp.get("/accounts")
def accounts():
    """Display every account with role statistics."""

    identity = current_identity()
    include_inactive = request.args.get("include_inactive", "1") not in {"0", "false", "no"}
    rows, stats = auth_service.list_accounts(
        get_context().account_repo, identity, include_inactive=include_inactive
    )
    return jsonify(
        {
            "accounts": [account_to_dict(a) for a in rows],
            "stats": account_stats_to_dict(stats),
        }
    )


@bp.patch("/accounts/<int:account_id>/role")
def change_role(account_id: int):
    identity = current_identity()
    data = bind(RoleForm)
    account = auth_service.set_role(
        identity=identity,
        account_id=account_id,
        role=data.role,
        session_factory=get_context().session_factory,
    )
    return jsonify({"account": account_to_dict(account)})


@bp.delete("/accounts/<int:account_id>")
def deactivate(account_id: int):
    """Deactivate an account and release its locations."""

    identity = current_identity()
    account = auth_service.deactivate_account(
        identity=identity,
        account_id=account_id,
        session_factory=get_context().session_factory,
    )
    return jsonify({"account": account_to_dict(account)})


@bp.post("/codes/sweep")
def sweep_codes():
    identity = current_identity()
    if not identity.is_admin:
        raise PermissionDenied("Administrator role required")
    swept = code_service.sweep_expired_codes(session_factory=get_context().session_factory)
    return jsonify({"swept": swept})
