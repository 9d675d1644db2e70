"""Helpers shared by the JSON blueprints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, TypeVar

from flask import abort, jsonify, request

from ..errors import AuthenticationRequired
from ..extensions import get_context
from ..forms.base import BaseForm, unwrap
from ..identity import Identity, identity_from_headers
from ..models.lifecycle import as_utc

T = TypeVar("T")

__all__ = [
    "AuthenticationRequired",
    "bind",
    "created",
    "current_identity",
    "get_context",
    "iso",
    "optional_identity",
    "request_data",
]


def request_data() -> dict[str, Any]:
    """JSON body when present, otherwise submitted form fields."""

    if request.is_json:
        payload = request.get_json(silent=True)
        if payload is None:
            abort(400, description="Malformed JSON body")
        if not isinstance(payload, dict):
            abort(400, description="Expected a JSON object")
        return payload
    return request.form.to_dict()


def bind(form_cls: type[BaseForm[T]], data: Optional[dict[str, Any]] = None) -> T:
    """Validate request data with a form or raise ``ValidationFailed``."""

    form = form_cls.from_mapping(request_data() if data is None else data)
    return unwrap(form.validate())


def optional_identity() -> Optional[Identity]:
    return identity_from_headers(request.headers)


def current_identity() -> Identity:
    identity = optional_identity()
    if identity is None:
        raise AuthenticationRequired()
    return identity


def iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return as_utc(value).isoformat()


def created(payload: dict[str, Any]):
    return jsonify(payload), 201
