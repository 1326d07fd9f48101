"""Admin command gateway: authorization and payload checks in front of the directory."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from rolesync.adapters.profiles.base import ProfileRecord
from rolesync.core.logging_safety import safe_account_ref
from rolesync.errors import InternalError, InvalidArgumentError, PermissionDeniedError
from rolesync.schemas.auth import AuthContext
from rolesync.schemas.directory import (
    CommandResult,
    DeleteUserRequest,
    SetUserRoleRequest,
    ToggleUserStatusRequest,
    UserListResponse,
    UserProfile,
)
from rolesync.services.directory import DirectorySynchronizer

logger = logging.getLogger(__name__)

_RequestT = TypeVar("_RequestT", bound=BaseModel)
_ResultT = TypeVar("_ResultT")


def format_timestamp(value: datetime | None) -> str | None:
    """Render a stored timestamp as ISO-8601 UTC with millisecond precision."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AdminCommandGateway:
    def __init__(self, synchronizer: DirectorySynchronizer) -> None:
        self._directory = synchronizer

    def set_user_role(self, *, auth: AuthContext, payload: Mapping[str, Any] | None) -> CommandResult:
        self._authorize(auth, operation="set_user_role", denial="You must be an admin to change user roles.")
        request = self._parse(
            SetUserRoleRequest,
            payload,
            message="The function must be called with a 'uid' and a valid 'newRole'.",
        )
        self._run(
            "set_user_role",
            request.uid,
            lambda: self._directory.set_role(actor=auth, target_id=request.uid, new_role=request.new_role),
            failure="Unable to update user role.",
        )
        role = request.new_role.value
        return CommandResult(message=f"Successfully updated role to {role} for user {request.uid}.")

    def toggle_user_status(self, *, auth: AuthContext, payload: Mapping[str, Any] | None) -> CommandResult:
        self._authorize(auth, operation="toggle_user_status", denial="Only admins can change user status.")
        request = self._parse(
            ToggleUserStatusRequest,
            payload,
            message="The function must be called with a 'uid' and a boolean 'disabled'.",
        )
        self._run(
            "toggle_user_status",
            request.uid,
            lambda: self._directory.set_enabled(actor=auth, target_id=request.uid, disabled=request.disabled),
            failure="Unable to update user status.",
        )
        return CommandResult(message=f"User {request.uid} status updated successfully.")

    def delete_user(self, *, auth: AuthContext, payload: Mapping[str, Any] | None) -> CommandResult:
        self._authorize(auth, operation="delete_user", denial="Only admins can delete users.")
        request = self._parse(DeleteUserRequest, payload, message="The function must be called with a 'uid'.")
        self._run(
            "delete_user",
            request.uid,
            lambda: self._directory.delete_account(actor=auth, target_id=request.uid),
            failure="Unable to delete user.",
        )
        return CommandResult(message=f"Successfully deleted user {request.uid}.")

    def get_all_users(self, *, auth: AuthContext) -> UserListResponse:
        self._authorize(auth, operation="get_all_users", denial="You must be an admin to view all users.")
        records = self._run("get_all_users", None, self._directory.list_profiles, failure="Unable to retrieve users.")
        return UserListResponse(users=[self._to_user_profile(record) for record in records])

    @staticmethod
    def _authorize(auth: AuthContext, *, operation: str, denial: str) -> None:
        if auth.is_admin:
            return
        logger.warning(
            "admin.rejected operation=%s actor=%s role=%s reason=not_admin",
            operation,
            safe_account_ref(auth.subject_id),
            auth.role,
        )
        raise PermissionDeniedError(denial)

    @staticmethod
    def _parse(model: type[_RequestT], payload: Mapping[str, Any] | None, *, message: str) -> _RequestT:
        if not isinstance(payload, Mapping):
            raise InvalidArgumentError(message)
        try:
            return model.model_validate(dict(payload))
        except ValidationError as exc:
            fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
            raise InvalidArgumentError(message, details={"fields": fields}) from exc

    @staticmethod
    def _run(operation: str, target_id: str | None, action: Callable[[], _ResultT], *, failure: str) -> _ResultT:
        try:
            return action()
        except Exception as exc:
            logger.exception(
                "admin.failed operation=%s uid=%s error=%s",
                operation,
                safe_account_ref(target_id) if target_id else "-",
                type(exc).__name__,
            )
            raise InternalError(failure) from exc

    @staticmethod
    def _to_user_profile(record: ProfileRecord) -> UserProfile:
        return UserProfile(
            uid=record.account_id,
            display_name=record.display_name,
            email=record.email,
            avatar_url=record.avatar_url,
            created_at=format_timestamp(record.created_at),
            role=record.role,
            disabled=record.disabled,
        )
