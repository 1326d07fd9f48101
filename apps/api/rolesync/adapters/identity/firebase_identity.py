"""Firebase Auth identity store adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rolesync.adapters.firebase_app import ensure_firebase_app
from rolesync.adapters.identity.base import (
    AccountNotFoundError,
    AccountRecord,
    IdentityStore,
    IdentityStoreError,
)


class FirebaseIdentityStore(IdentityStore):
    """Maps directory writes onto ``firebase_admin.auth`` user management calls."""

    def __init__(self, project_id: str | None = None) -> None:
        self._project_id = project_id

    def _auth(self):
        try:
            from firebase_admin import auth as firebase_auth
        except ImportError as exc:  # pragma: no cover - depends on optional package
            raise IdentityStoreError("Firebase identity store is unavailable") from exc

        ensure_firebase_app(self._project_id)
        return firebase_auth

    def create_account(
        self,
        *,
        display_name: str | None = None,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> AccountRecord:
        firebase_auth = self._auth()
        try:
            user = firebase_auth.create_user(display_name=display_name, email=email, photo_url=avatar_url)
        except Exception as exc:
            raise IdentityStoreError("Unable to create account") from exc
        return self._to_record(user)

    def get_account(self, uid: str) -> AccountRecord | None:
        firebase_auth = self._auth()
        try:
            user = firebase_auth.get_user(uid)
        except firebase_auth.UserNotFoundError:
            return None
        except Exception as exc:
            raise IdentityStoreError("Unable to read account") from exc
        return self._to_record(user)

    def set_claims(self, uid: str, claims: Mapping[str, Any]) -> None:
        firebase_auth = self._auth()
        try:
            firebase_auth.set_custom_user_claims(uid, dict(claims))
        except firebase_auth.UserNotFoundError as exc:
            raise AccountNotFoundError(f"Account {uid} not found") from exc
        except Exception as exc:
            raise IdentityStoreError("Unable to set custom claims") from exc

    def set_login_enabled(self, uid: str, enabled: bool) -> None:
        firebase_auth = self._auth()
        try:
            firebase_auth.update_user(uid, disabled=not enabled)
        except firebase_auth.UserNotFoundError as exc:
            raise AccountNotFoundError(f"Account {uid} not found") from exc
        except Exception as exc:
            raise IdentityStoreError("Unable to update account status") from exc

    def delete_account(self, uid: str) -> None:
        firebase_auth = self._auth()
        try:
            firebase_auth.delete_user(uid)
        except firebase_auth.UserNotFoundError as exc:
            raise AccountNotFoundError(f"Account {uid} not found") from exc
        except Exception as exc:
            raise IdentityStoreError("Unable to delete account") from exc

    @staticmethod
    def _to_record(user: Any) -> AccountRecord:
        return AccountRecord(
            uid=user.uid,
            display_name=user.display_name,
            email=user.email,
            avatar_url=user.photo_url,
            claims=dict(user.custom_claims or {}),
            login_enabled=not user.disabled,
        )


__all__ = ["FirebaseIdentityStore"]
