"""Claim, event-code and redemption forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import MAX_CODE_DIGITS
from .base import BaseForm

_UNSET = object()


@dataclass(frozen=True)
class ClaimInput:
    name: str
    location: str
    contact_number: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ClaimUpdateInput:
    """Only fields present in the request are changed."""

    description: object = _UNSET
    contact_number: object = _UNSET

    def changes(self) -> dict[str, Optional[str]]:
        return {
            key: value  # type: ignore[misc]
            for key, value in (
                ("description", self.description),
                ("contact_number", self.contact_number),
            )
            if value is not _UNSET
        }


@dataclass(frozen=True)
class IssueCodeInput:
    claim_id: int


@dataclass(frozen=True)
class RedeemInput:
    code: str
    score: int
    comment: Optional[str] = None


class ClaimForm(BaseForm[ClaimInput]):
    FIELDS = ("name", "ngo_name", "location", "contact_number", "description")

    def clean(self) -> ClaimInput:
        # ``ngo_name`` is accepted as an alias used by older clients.
        if not self.raw_data.get("name") and self.raw_data.get("ngo_name"):
            self.raw_data["name"] = self.raw_data["ngo_name"]
        name = self._text("name", required=True, max_length=128)
        location = self._text("location", required=True, max_length=255)
        contact = self._text("contact_number", max_length=32)
        description = self._text("description", max_length=1000)
        return ClaimInput(
            name=name or "",
            location=location or "",
            contact_number=contact,
            description=description,
        )


class ClaimUpdateForm(BaseForm[ClaimUpdateInput]):
    FIELDS = ("description", "contact_number")

    def clean(self) -> ClaimUpdateInput:
        values: dict[str, object] = {}
        if "description" in self.raw_data:
            values["description"] = self._text("description", max_length=1000)
        if "contact_number" in self.raw_data:
            values["contact_number"] = self._text("contact_number", max_length=32)
        if not values:
            self._add_error("description", "Provide a description or contact number to update.")
        return ClaimUpdateInput(**values)


class IssueCodeForm(BaseForm[IssueCodeInput]):
    FIELDS = ("claim_id",)

    def clean(self) -> IssueCodeInput:
        claim_id = self._int("claim_id", required=True, positive=True, label="Claim ID")
        return IssueCodeInput(claim_id=claim_id or 0)


class RedeemForm(BaseForm[RedeemInput]):
    """``otp``/``stars`` are accepted as aliases for ``code``/``score``."""

    FIELDS = ("code", "otp", "score", "stars", "comment")

    def clean(self) -> RedeemInput:
        if self.raw_data.get("code") is None and self.raw_data.get("otp") is not None:
            self.raw_data["code"] = self.raw_data["otp"]
        if self.raw_data.get("score") is None and self.raw_data.get("stars") is not None:
            self.raw_data["score"] = self.raw_data["stars"]

        raw_code = self.raw_data.get("code")
        if raw_code is not None and not isinstance(raw_code, str):
            # A JSON number would drop leading zeros.
            self._add_error("code", "Code must be sent as a string of digits.")
            code = None
        else:
            code = self._text("code", required=True, max_length=MAX_CODE_DIGITS)
            if code is not None and not code.isdigit():
                self._add_error("code", "Code must contain digits only.")
        # Range is checked by the redemption itself (ScoreOutOfRange).
        score = self._int("score", required=True)
        comment = self._text("comment", max_length=1000)
        return RedeemInput(code=code or "", score=score or 0, comment=comment)
