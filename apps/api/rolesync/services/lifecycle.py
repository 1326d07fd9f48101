"""Account lifecycle event intake."""

from __future__ import annotations

from rolesync.adapters.profiles import ProfileStore
from rolesync.errors import InternalError
from rolesync.repositories.memory import InMemoryIdentityStore, LifecycleEvent
from rolesync.schemas.directory import AccountSnapshot
from rolesync.services.directory import DirectorySynchronizer


class LifecycleEventService:
    """Routes identity-store events to the directory.

    Events come from a trusted source and carry no caller to authorize. Failures
    are already logged by the synchronizer; they surface here as ``InternalError``
    so the delivering platform retries the event.
    """

    def __init__(self, synchronizer: DirectorySynchronizer) -> None:
        self._directory = synchronizer

    def handle_created(self, account: AccountSnapshot) -> None:
        try:
            self._directory.on_account_created(account)
        except Exception as exc:
            raise InternalError("Unable to process account created event.") from exc

    def handle_deleted(self, uid: str) -> None:
        try:
            self._directory.on_account_deleted(uid)
        except Exception as exc:
            raise InternalError("Unable to process account deleted event.") from exc

    def deliver(self, event: LifecycleEvent) -> None:
        if event.kind == "created":
            account = event.account
            self.handle_created(
                AccountSnapshot(
                    uid=account.uid,
                    display_name=account.display_name,
                    email=account.email,
                    avatar_url=account.avatar_url,
                )
            )
        else:
            self.handle_deleted(event.account.uid)


def deliver_in_process(identity_store: InMemoryIdentityStore, profile_store: ProfileStore) -> LifecycleEventService:
    """Subscribe the directory to a process-local identity store's events."""
    service = LifecycleEventService(DirectorySynchronizer(identity_store, profile_store))
    identity_store.subscribe(service.deliver)
    return service
