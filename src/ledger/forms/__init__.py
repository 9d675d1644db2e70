"""Shared request validation: every form yields ``Valid`` or ``Invalid``."""

from .accounts import LoginForm, LoginInput, RoleForm, RoleInput, SignupForm, SignupInput
from .base import BaseForm, FormResult, Invalid, Valid, unwrap
from .claims import (
    ClaimForm,
    ClaimInput,
    ClaimUpdateForm,
    ClaimUpdateInput,
    IssueCodeForm,
    IssueCodeInput,
    RedeemForm,
    RedeemInput,
)
from .projects import (
    ProjectForm,
    ProjectInput,
    TaskForm,
    TaskInput,
    TaskUpdateForm,
    TaskUpdateInput,
)

__all__ = [
    "BaseForm",
    "ClaimForm",
    "ClaimInput",
    "ClaimUpdateForm",
    "ClaimUpdateInput",
    "FormResult",
    "Invalid",
    "IssueCodeForm",
    "IssueCodeInput",
    "LoginForm",
    "LoginInput",
    "ProjectForm",
    "ProjectInput",
    "RedeemForm",
    "RedeemInput",
    "RoleForm",
    "RoleInput",
    "SignupForm",
    "SignupInput",
    "TaskForm",
    "TaskInput",
    "TaskUpdateForm",
    "TaskUpdateInput",
    "Valid",
    "unwrap",
]
