"""Caller identity supplied by the upstream authenticator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .models.account import ROLE_ADMIN, ROLE_ORGANIZATION, ROLES

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"


@dataclass(frozen=True)
class Identity:
    """Verified account id and role for one request; trusted as given."""

    account_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_organization(self) -> bool:
        return self.role == ROLE_ORGANIZATION


def identity_from_headers(headers: Mapping[str, str]) -> Optional[Identity]:
    """Build an identity from forwarded headers, or None when absent or malformed."""

    raw_id = (headers.get(USER_ID_HEADER) or "").strip()
    role = (headers.get(USER_ROLE_HEADER) or "").strip().lower()
    if not raw_id or role not in ROLES:
        return None
    try:
        account_id = int(raw_id)
    except ValueError:
        return None
    if account_id <= 0:
        return None
    return Identity(account_id=account_id, role=role)
