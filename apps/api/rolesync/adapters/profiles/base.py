"""Profile store interface: one profile document per account uid."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from rolesync.schemas.directory import Role

# Fields an admin command may change after creation.
MUTABLE_PROFILE_FIELDS = frozenset({"role", "disabled"})


class ProfileStoreError(Exception):
    """Raised when the document store rejects or fails a call."""


class ProfileNotFoundError(ProfileStoreError):
    """Raised when a partial update targets a missing profile document."""


@dataclass(slots=True)
class ProfileRecord:
    account_id: str
    display_name: str
    email: str | None
    avatar_url: str | None
    role: Role
    disabled: bool = False
    created_at: datetime | None = None


class ProfileStore(ABC):
    @abstractmethod
    def create(self, profile: ProfileRecord) -> None:
        """Write the profile for ``profile.account_id``.

        The store stamps ``created_at``. Writing over an existing document
        replaces every other field but keeps its original ``created_at``.
        """

    @abstractmethod
    def get(self, account_id: str) -> ProfileRecord | None:
        """Return the profile or ``None`` when no document exists."""

    @abstractmethod
    def update(self, account_id: str, changes: Mapping[str, Any]) -> None:
        """Apply a partial update; raises ``ProfileNotFoundError`` if missing."""

    @abstractmethod
    def delete(self, account_id: str) -> bool:
        """Delete the document. Returns whether one existed."""

    @abstractmethod
    def list_profiles(self) -> list[ProfileRecord]:
        """Return every profile ordered by ``created_at`` descending."""


def validate_profile_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Reject unknown fields and coerce ``role`` into the closed role set."""
    unknown = set(changes) - MUTABLE_PROFILE_FIELDS
    if unknown:
        raise ProfileStoreError(f"Unsupported profile fields: {sorted(unknown)}")

    validated = dict(changes)
    if "role" in validated:
        try:
            validated["role"] = Role(validated["role"])
        except ValueError as exc:
            raise ProfileStoreError(f"Invalid role value: {validated['role']!r}") from exc
    if "disabled" in validated:
        validated["disabled"] = bool(validated["disabled"])
    return validated


__all__ = [
    "MUTABLE_PROFILE_FIELDS",
    "ProfileNotFoundError",
    "ProfileRecord",
    "ProfileStore",
    "ProfileStoreError",
    "validate_profile_changes",
]
