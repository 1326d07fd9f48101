"""Identity store adapters."""

from .base import AccountNotFoundError, AccountRecord, IdentityStore, IdentityStoreError
from .firebase_identity import FirebaseIdentityStore

__all__ = [
    "AccountNotFoundError",
    "AccountRecord",
    "FirebaseIdentityStore",
    "IdentityStore",
    "IdentityStoreError",
]
