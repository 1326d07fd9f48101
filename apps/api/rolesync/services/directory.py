"""Directory synchronizer: ordered writes that keep accounts and profiles aligned."""

from __future__ import annotations

import logging

from rolesync.adapters.identity.base import IdentityStore
from rolesync.adapters.profiles.base import ProfileRecord, ProfileStore
from rolesync.core.logging_safety import safe_account_ref
from rolesync.schemas.auth import AuthContext
from rolesync.schemas.directory import DEFAULT_DISPLAY_NAME, DEFAULT_ROLE, AccountSnapshot, Role

logger = logging.getLogger(__name__)


class DirectorySynchronizer:
    """Applies account lifecycle events and admin commands across both stores.

    The two writes of each command are not transactional. When the second write
    fails the first one stays applied and the error propagates; every operation
    converges when replayed with the same arguments.

    Admin commands expect the caller to have been authorized already; ``actor``
    is only carried for logging.
    """

    def __init__(self, identity_store: IdentityStore, profile_store: ProfileStore) -> None:
        self._identity = identity_store
        self._profiles = profile_store

    def on_account_created(self, account: AccountSnapshot) -> None:
        account_ref = safe_account_ref(account.uid)
        logger.info("directory.account_created uid=%s", account_ref)
        try:
            self._identity.set_claims(account.uid, {"role": DEFAULT_ROLE.value})
            self._profiles.create(
                ProfileRecord(
                    account_id=account.uid,
                    display_name=account.display_name or DEFAULT_DISPLAY_NAME,
                    email=account.email,
                    avatar_url=account.avatar_url or None,
                    role=DEFAULT_ROLE,
                    disabled=False,
                )
            )
        except Exception:
            logger.exception("directory.account_created_failed uid=%s", account_ref)
            raise

        logger.info("directory.profile_created uid=%s role=%s", account_ref, DEFAULT_ROLE.value)

    def on_account_deleted(self, uid: str) -> None:
        account_ref = safe_account_ref(uid)
        try:
            existed = self._profiles.delete(uid)
        except Exception:
            logger.exception("directory.account_deleted_failed uid=%s", account_ref)
            raise

        logger.info("directory.profile_deleted uid=%s existed=%s", account_ref, existed)

    def set_role(self, *, actor: AuthContext, target_id: str, new_role: Role) -> None:
        new_role = Role(new_role)
        self._identity.set_claims(target_id, {"role": new_role.value})
        self._profiles.update(target_id, {"role": new_role})
        logger.info(
            "directory.role_set uid=%s role=%s actor=%s",
            safe_account_ref(target_id),
            new_role.value,
            safe_account_ref(actor.subject_id),
        )

    def set_enabled(self, *, actor: AuthContext, target_id: str, disabled: bool) -> None:
        self._identity.set_login_enabled(target_id, not disabled)
        self._profiles.update(target_id, {"disabled": disabled})
        logger.info(
            "directory.status_set uid=%s disabled=%s actor=%s",
            safe_account_ref(target_id),
            disabled,
            safe_account_ref(actor.subject_id),
        )

    def delete_account(self, *, actor: AuthContext, target_id: str) -> None:
        # The profile goes away when the identity store emits the deleted event.
        self._identity.delete_account(target_id)
        logger.info(
            "directory.account_delete_requested uid=%s actor=%s",
            safe_account_ref(target_id),
            safe_account_ref(actor.subject_id),
        )

    def list_profiles(self) -> list[ProfileRecord]:
        return self._profiles.list_profiles()
