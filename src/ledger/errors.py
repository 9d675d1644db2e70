"""Error taxonomy shared by the services and the HTTP boundary.

Rule violations are expected outcomes the caller can fix by changing its
input; they carry enough detail to do so. ``StoreUnavailable`` wraps
transport-level persistence failures and is never retried here.
"""

from __future__ import annotations

from typing import Mapping


class LedgerError(Exception):
    """Root of all errors raised deliberately by Ledger."""

    code = "ledger_error"
    status = 500
    default_message = "Ledger operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        return {"error": self.code, "message": self.message}


class RuleViolation(LedgerError, ValueError):
    """A business rule rejected the request."""

    code = "rule_violation"
    status = 400


class LocationAlreadyClaimed(RuleViolation):
    code = "location_already_claimed"
    status = 409

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f'Location "{location}" is already claimed by another organization')


class ClaimNotFound(RuleViolation):
    """Unknown claim id, or a claim that has already been released."""

    code = "claim_not_found"
    status = 404
    default_message = "Claim not found or no longer active"


class NotClaimOwner(RuleViolation):
    code = "not_claim_owner"
    status = 403
    default_message = "Only the owning organization may do this"


class InvalidOrExpiredCode(RuleViolation):
    code = "invalid_or_expired_code"
    status = 400
    default_message = "Invalid or expired code"


class SelfRatingForbidden(RuleViolation):
    code = "self_rating_forbidden"
    status = 403
    default_message = "You cannot rate your own event"


class DuplicateRating(RuleViolation):
    code = "duplicate_rating"
    status = 409
    default_message = "You have already rated this event"


class ScoreOutOfRange(RuleViolation):
    code = "score_out_of_range"
    status = 400

    def __init__(self, score: object, low: int = 1, high: int = 5) -> None:
        self.score = score
        super().__init__(f"Score must be a whole number between {low} and {high}, got {score!r}")


class PermissionDenied(RuleViolation):
    code = "permission_denied"
    status = 403
    default_message = "Your role does not allow this operation"


class AccountNotFound(RuleViolation):
    code = "account_not_found"
    status = 404
    default_message = "Account not found"


class AccountAlreadyExists(RuleViolation):
    code = "account_already_exists"
    status = 409
    default_message = "An account with this email already exists"


class CodeNotFound(RuleViolation):
    code = "code_not_found"
    status = 404
    default_message = "Event code not found"


class ProjectNotFound(RuleViolation):
    code = "project_not_found"
    status = 404
    default_message = "Project not found"


class TaskNotFound(RuleViolation):
    code = "task_not_found"
    status = 404
    default_message = "Task not found"


class ValidationFailed(RuleViolation):
    """Input failed schema validation; ``errors`` maps field -> messages."""

    code = "validation_error"
    status = 400
    default_message = "Validation Error"

    def __init__(self, errors: Mapping[str, list[str]], message: str | None = None) -> None:
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["errors"] = self.errors
        return payload


class AuthenticationRequired(LedgerError):
    """No verified identity accompanied the request."""

    code = "authentication_required"
    status = 401
    default_message = "Authenticated identity required"


class StoreUnavailable(LedgerError):
    """The persistent store could not be reached or refused the operation."""

    code = "store_unavailable"
    status = 503
    default_message = "The data store is temporarily unavailable"


__all__ = [
    "AccountAlreadyExists",
    "AccountNotFound",
    "AuthenticationRequired",
    "ClaimNotFound",
    "CodeNotFound",
    "DuplicateRating",
    "InvalidOrExpiredCode",
    "LedgerError",
    "LocationAlreadyClaimed",
    "NotClaimOwner",
    "PermissionDenied",
    "ProjectNotFound",
    "RuleViolation",
    "ScoreOutOfRange",
    "SelfRatingForbidden",
    "StoreUnavailable",
    "TaskNotFound",
    "ValidationFailed",
]
