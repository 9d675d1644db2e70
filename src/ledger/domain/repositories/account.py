"""Account repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Read access to accounts."""

    def get_by_id(self, account_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        ...

    def get_by_email(self, email: str) -> Optional[Account]:
        """Retrieve an account by email."""
        ...

    def list_all(self, include_inactive: bool = False) -> list[Account]:
        """List accounts, newest first."""
        ...
