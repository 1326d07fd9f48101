"""Identity store interface: the account registry that owns uids and claims."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class IdentityStoreError(Exception):
    """Raised when the account registry rejects or fails a call."""


class AccountNotFoundError(IdentityStoreError):
    """Raised when the target uid is unknown to the account registry."""


@dataclass(slots=True)
class AccountRecord:
    uid: str
    display_name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)
    login_enabled: bool = True


class IdentityStore(ABC):
    """Provider-neutral account registry.

    Implementations emit ``created``/``deleted`` lifecycle events on their own
    channel; this interface only covers the writes the directory performs.
    """

    @abstractmethod
    def create_account(
        self,
        *,
        display_name: str | None = None,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> AccountRecord:
        """Register a new account; the store assigns the uid."""

    @abstractmethod
    def get_account(self, uid: str) -> AccountRecord | None:
        """Return the account or ``None`` when the uid is unknown."""

    @abstractmethod
    def set_claims(self, uid: str, claims: Mapping[str, Any]) -> None:
        """Replace the custom claim set attached to the account."""

    @abstractmethod
    def set_login_enabled(self, uid: str, enabled: bool) -> None:
        """Allow or reject future sign-ins for the account."""

    @abstractmethod
    def delete_account(self, uid: str) -> None:
        """Remove the account; the store emits a ``deleted`` event afterwards."""


__all__ = ["AccountNotFoundError", "AccountRecord", "IdentityStore", "IdentityStoreError"]
