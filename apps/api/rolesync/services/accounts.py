"""Account registration against the identity store."""

from __future__ import annotations

import logging

from rolesync.adapters.identity import IdentityStore, IdentityStoreError
from rolesync.core.logging_safety import safe_account_ref
from rolesync.errors import InternalError
from rolesync.schemas.internal import RegisterAccountRequest, RegisterAccountResponse

logger = logging.getLogger(__name__)


class AccountRegistrationService:
    """Creates accounts; the directory picks them up from the resulting ``created`` event."""

    def __init__(self, identity_store: IdentityStore) -> None:
        self._identity = identity_store

    def register(self, payload: RegisterAccountRequest) -> RegisterAccountResponse:
        try:
            account = self._identity.create_account(
                display_name=payload.display_name,
                email=payload.email,
                avatar_url=payload.avatar_url,
            )
        except IdentityStoreError as exc:
            logger.exception("accounts.register_failed")
            raise InternalError("Unable to register account.") from exc

        logger.info("accounts.registered uid=%s", safe_account_ref(account.uid))
        return RegisterAccountResponse(uid=account.uid)
