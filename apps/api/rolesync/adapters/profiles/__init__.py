"""Profile store adapters."""

from .base import (
    ProfileNotFoundError,
    ProfileRecord,
    ProfileStore,
    ProfileStoreError,
    validate_profile_changes,
)
from .firestore_profiles import FirestoreProfileStore

__all__ = [
    "FirestoreProfileStore",
    "ProfileNotFoundError",
    "ProfileRecord",
    "ProfileStore",
    "ProfileStoreError",
    "validate_profile_changes",
]
