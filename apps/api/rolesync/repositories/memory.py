"""In-memory stores used for local development and tests."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from itertools import count
import logging
from typing import Any, Literal
from uuid import uuid4

from rolesync.adapters.identity.base import (
    AccountNotFoundError,
    AccountRecord,
    IdentityStore,
    IdentityStoreError,
)
from rolesync.adapters.profiles.base import (
    ProfileNotFoundError,
    ProfileRecord,
    ProfileStore,
    ProfileStoreError,
    validate_profile_changes,
)
from rolesync.core.logging_safety import safe_account_ref

logger = logging.getLogger(__name__)

_IDENTITY_FAILPOINT_OPERATIONS = ("set_claims", "set_login_enabled", "delete_account")
_PROFILE_FAILPOINT_OPERATIONS = ("create", "update", "delete", "list_profiles")
_EVENT_HISTORY_LIMIT = 100


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _event_history() -> deque[LifecycleEvent]:
    return deque(maxlen=_EVENT_HISTORY_LIMIT)


@dataclass(slots=True)
class LifecycleEvent:
    kind: Literal["created", "deleted"]
    account: AccountRecord


@dataclass(slots=True)
class InMemoryIdentityStore(IdentityStore):
    """Deterministic account registry.

    Every lifecycle event is handed to the subscribed listeners right after the
    write, the way the hosting platform fires its auth triggers. Listener
    failures are logged and do not fail the write. The most recent events are
    kept in ``emitted_events`` for inspection.
    """

    accounts: dict[str, AccountRecord] = field(default_factory=dict)
    emitted_events: deque[LifecycleEvent] = field(default_factory=_event_history)
    listeners: list[Callable[[LifecycleEvent], None]] = field(default_factory=list)
    write_count: int = 0
    failpoints: dict[str, str] = field(default_factory=dict)

    def subscribe(self, listener: Callable[[LifecycleEvent], None]) -> None:
        self.listeners.append(listener)

    def fail_next(self, operation: str, message: str = "Injected identity store failure") -> None:
        """Make the next call of ``operation`` raise ``IdentityStoreError``."""
        if operation not in _IDENTITY_FAILPOINT_OPERATIONS:
            raise ValueError(f"Unknown identity store operation: {operation}")
        self.failpoints[operation] = message

    def _maybe_fail(self, operation: str) -> None:
        message = self.failpoints.pop(operation, None)
        if message is not None:
            raise IdentityStoreError(message)

    def _require(self, uid: str) -> AccountRecord:
        account = self.accounts.get(uid)
        if account is None:
            raise AccountNotFoundError(f"Account {uid} not found")
        return account

    def _emit(self, event: LifecycleEvent) -> None:
        self.emitted_events.append(event)
        for listener in list(self.listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "identity.event_delivery_failed kind=%s uid=%s",
                    event.kind,
                    safe_account_ref(event.account.uid),
                )

    def create_account(
        self,
        *,
        display_name: str | None = None,
        email: str | None = None,
        avatar_url: str | None = None,
        uid: str | None = None,
    ) -> AccountRecord:
        account = AccountRecord(
            uid=uid or str(uuid4()),
            display_name=display_name,
            email=email,
            avatar_url=avatar_url,
        )
        if account.uid in self.accounts:
            raise IdentityStoreError(f"Account {account.uid} already exists")
        self.accounts[account.uid] = account
        self.write_count += 1
        self._emit(LifecycleEvent(kind="created", account=replace(account)))
        return account

    def get_account(self, uid: str) -> AccountRecord | None:
        return self.accounts.get(uid)

    def set_claims(self, uid: str, claims: Mapping[str, Any]) -> None:
        self._maybe_fail("set_claims")
        account = self._require(uid)
        account.claims = dict(claims)
        self.write_count += 1

    def set_login_enabled(self, uid: str, enabled: bool) -> None:
        self._maybe_fail("set_login_enabled")
        account = self._require(uid)
        account.login_enabled = enabled
        self.write_count += 1

    def delete_account(self, uid: str) -> None:
        self._maybe_fail("delete_account")
        account = self._require(uid)
        del self.accounts[uid]
        self.write_count += 1
        self._emit(LifecycleEvent(kind="deleted", account=account))


@dataclass(slots=True)
class InMemoryProfileStore(ProfileStore):
    """Dict-backed profile documents; ties on ``created_at`` list newest write first."""

    profiles: dict[str, ProfileRecord] = field(default_factory=dict)
    clock: Callable[[], datetime] = _utcnow
    write_count: int = 0
    failpoints: dict[str, str] = field(default_factory=dict)
    _sequence: dict[str, int] = field(default_factory=dict)
    _counter: Any = field(default_factory=count)

    def fail_next(self, operation: str, message: str = "Injected profile store failure") -> None:
        """Make the next call of ``operation`` raise ``ProfileStoreError``."""
        if operation not in _PROFILE_FAILPOINT_OPERATIONS:
            raise ValueError(f"Unknown profile store operation: {operation}")
        self.failpoints[operation] = message

    def _maybe_fail(self, operation: str) -> None:
        message = self.failpoints.pop(operation, None)
        if message is not None:
            raise ProfileStoreError(message)

    def create(self, profile: ProfileRecord) -> None:
        self._maybe_fail("create")
        existing = self.profiles.get(profile.account_id)
        created_at = existing.created_at if existing is not None else self.clock()
        self.profiles[profile.account_id] = replace(profile, created_at=created_at)
        if existing is None:
            self._sequence[profile.account_id] = next(self._counter)
        self.write_count += 1

    def get(self, account_id: str) -> ProfileRecord | None:
        profile = self.profiles.get(account_id)
        return replace(profile) if profile is not None else None

    def update(self, account_id: str, changes: Mapping[str, Any]) -> None:
        self._maybe_fail("update")
        validated = validate_profile_changes(changes)
        profile = self.profiles.get(account_id)
        if profile is None:
            raise ProfileNotFoundError(f"Profile {account_id} not found")
        for key, value in validated.items():
            setattr(profile, key, value)
        self.write_count += 1

    def delete(self, account_id: str) -> bool:
        self._maybe_fail("delete")
        existed = self.profiles.pop(account_id, None) is not None
        self._sequence.pop(account_id, None)
        if existed:
            self.write_count += 1
        return existed

    def list_profiles(self) -> list[ProfileRecord]:
        self._maybe_fail("list_profiles")
        epoch = datetime.min.replace(tzinfo=UTC)
        ordered = sorted(
            self.profiles.values(),
            key=lambda record: (record.created_at or epoch, self._sequence.get(record.account_id, -1)),
            reverse=True,
        )
        return [replace(record) for record in ordered]


@dataclass(slots=True)
class CommentRecord:
    page_id: str
    name: str
    comment: str
    timestamp: datetime


@dataclass(slots=True)
class InMemoryCommentStore:
    comments: list[CommentRecord] = field(default_factory=list)
    clock: Callable[[], datetime] = _utcnow

    def add_comment(self, *, page_id: str, name: str, comment: str) -> CommentRecord:
        record = CommentRecord(page_id=page_id, name=name, comment=comment, timestamp=self.clock())
        self.comments.append(record)
        return record

    def list_comments(self, page_id: str) -> list[CommentRecord]:
        return [record for record in self.comments if record.page_id == page_id]
