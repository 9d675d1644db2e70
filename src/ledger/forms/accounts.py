"""Signup, login and role-change forms."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..models.account import ROLE_ORGANIZATION, ROLE_USER, ROLES, SIGNUP_ROLES
from .base import BaseForm
from .claims import ClaimInput

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class SignupInput:
    name: str
    email: str
    password: str
    role: str
    organization: Optional[str] = None
    claim: Optional[ClaimInput] = None


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


@dataclass(frozen=True)
class RoleInput:
    role: str


class SignupForm(BaseForm[SignupInput]):
    """Organization signups must also name the location they claim."""

    FIELDS = (
        "name",
        "email",
        "password",
        "role",
        "organization",
        "ngo_name",
        "location",
        "contact_number",
        "description",
    )

    def clean(self) -> SignupInput:
        name = self._text("name", required=True, max_length=128)
        email = self._text("email", required=True, max_length=255)
        if email is not None:
            email = email.lower()
            if not _EMAIL_RE.match(email):
                self._add_error("email", "Invalid email format.")
        password = self.raw_data.get("password") or ""
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            self._add_error(
                "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        role = self._choice("role", SIGNUP_ROLES, default=ROLE_USER) or ROLE_USER
        organization = self._text("organization", max_length=128)

        claim = None
        if role == ROLE_ORGANIZATION:
            claim_name = self._text(
                "ngo_name", required=True, max_length=128, label="Organization name"
            )
            location = self._text("location", required=True, max_length=255)
            contact = self._text("contact_number", max_length=32)
            description = self._text("description", max_length=1000)
            if claim_name and location:
                claim = ClaimInput(
                    name=claim_name,
                    location=location,
                    contact_number=contact,
                    description=description,
                )
            organization = organization or claim_name

        return SignupInput(
            name=name or "",
            email=email or "",
            password=password if isinstance(password, str) else "",
            role=role,
            organization=organization,
            claim=claim,
        )


class LoginForm(BaseForm[LoginInput]):
    FIELDS = ("email", "password")

    def clean(self) -> LoginInput:
        email = self._text("email", required=True)
        password = self.raw_data.get("password")
        if not isinstance(password, str) or not password:
            self._add_error("password", "Password is required.")
            password = ""
        return LoginInput(email=(email or "").lower(), password=password)


class RoleForm(BaseForm[RoleInput]):
    FIELDS = ("role",)

    def clean(self) -> RoleInput:
        role = self._choice("role", ROLES)
        if role is None and "role" not in self.errors:
            self._add_error("role", "Role is required.")
        return RoleInput(role=role or "")
