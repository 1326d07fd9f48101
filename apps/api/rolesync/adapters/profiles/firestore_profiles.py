"""Firestore profile store adapter."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from rolesync.adapters.firebase_app import ensure_firebase_app
from rolesync.adapters.profiles.base import (
    ProfileNotFoundError,
    ProfileRecord,
    ProfileStore,
    ProfileStoreError,
    validate_profile_changes,
)
from rolesync.core.logging_safety import safe_account_ref
from rolesync.schemas.directory import DEFAULT_ROLE, Role

logger = logging.getLogger(__name__)

# Document field names as stored in the ``users`` collection.
_FIELD_NAMES: dict[str, str] = {
    "display_name": "displayName",
    "email": "email",
    "avatar_url": "photoURL",
    "created_at": "createdAt",
    "role": "role",
    "disabled": "disabled",
}


class FirestoreProfileStore(ProfileStore):
    """Keeps one document per uid in a Firestore collection."""

    def __init__(self, collection: str = "users", project_id: str | None = None, client: Any | None = None) -> None:
        self._collection_name = collection
        self._project_id = project_id
        self._client = client

    def _db(self):
        if self._client is None:
            try:
                from firebase_admin import firestore
            except ImportError as exc:  # pragma: no cover - depends on optional package
                raise ProfileStoreError("Firestore profile store is unavailable") from exc

            ensure_firebase_app(self._project_id)
            self._client = firestore.client()
        return self._client

    def _collection(self):
        return self._db().collection(self._collection_name)

    def create(self, profile: ProfileRecord) -> None:
        from google.api_core.exceptions import AlreadyExists
        from google.cloud.firestore import SERVER_TIMESTAMP

        fields = {
            _FIELD_NAMES["display_name"]: profile.display_name,
            _FIELD_NAMES["email"]: profile.email,
            _FIELD_NAMES["avatar_url"]: profile.avatar_url,
            _FIELD_NAMES["role"]: Role(profile.role).value,
            _FIELD_NAMES["disabled"]: profile.disabled,
        }
        doc_ref = self._collection().document(profile.account_id)
        try:
            doc_ref.create({**fields, _FIELD_NAMES["created_at"]: SERVER_TIMESTAMP})
        except AlreadyExists:
            # Replayed signup: refresh the mirrored fields, keep createdAt.
            try:
                doc_ref.set(fields, merge=True)
            except Exception as exc:
                raise ProfileStoreError("Unable to overwrite profile document") from exc
        except Exception as exc:
            raise ProfileStoreError("Unable to create profile document") from exc

    def get(self, account_id: str) -> ProfileRecord | None:
        try:
            snapshot = self._collection().document(account_id).get()
        except Exception as exc:
            raise ProfileStoreError("Unable to read profile document") from exc
        if not snapshot.exists:
            return None
        return self._to_record(snapshot.id, snapshot.to_dict() or {})

    def update(self, account_id: str, changes: Mapping[str, Any]) -> None:
        from google.api_core.exceptions import NotFound

        validated = validate_profile_changes(changes)
        fields = {
            _FIELD_NAMES[key]: value.value if isinstance(value, Role) else value
            for key, value in validated.items()
        }
        try:
            self._collection().document(account_id).update(fields)
        except NotFound as exc:
            raise ProfileNotFoundError(f"Profile {account_id} not found") from exc
        except Exception as exc:
            raise ProfileStoreError("Unable to update profile document") from exc

    def delete(self, account_id: str) -> bool:
        doc_ref = self._collection().document(account_id)
        try:
            existed = doc_ref.get().exists
            doc_ref.delete()
        except Exception as exc:
            raise ProfileStoreError("Unable to delete profile document") from exc
        return existed

    def list_profiles(self) -> list[ProfileRecord]:
        from google.cloud.firestore import Query

        try:
            query = self._collection().order_by(_FIELD_NAMES["created_at"], direction=Query.DESCENDING)
            snapshots = list(query.stream())
        except Exception as exc:
            raise ProfileStoreError("Unable to list profile documents") from exc
        return [self._to_record(snapshot.id, snapshot.to_dict() or {}) for snapshot in snapshots]

    @staticmethod
    def _to_record(account_id: str, data: dict[str, Any]) -> ProfileRecord:
        raw_role = data.get(_FIELD_NAMES["role"])
        if not raw_role:
            logger.warning(
                "profiles.malformed_document uid=%s field=role reason=missing",
                safe_account_ref(account_id),
            )
            role = DEFAULT_ROLE
        else:
            try:
                role = Role(raw_role)
            except ValueError as exc:
                logger.error(
                    "profiles.malformed_document uid=%s field=role reason=unknown_role",
                    safe_account_ref(account_id),
                )
                raise ProfileStoreError(f"Profile document has an unknown role: {raw_role!r}") from exc
        return ProfileRecord(
            account_id=account_id,
            display_name=data.get(_FIELD_NAMES["display_name"]) or "",
            email=data.get(_FIELD_NAMES["email"]),
            avatar_url=data.get(_FIELD_NAMES["avatar_url"]),
            role=role,
            disabled=bool(data.get(_FIELD_NAMES["disabled"], False)),
            created_at=data.get(_FIELD_NAMES["created_at"]),
        )


__all__ = ["FirestoreProfileStore"]
