"""User directory schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class Role(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


DEFAULT_ROLE = Role.VIEWER
DEFAULT_DISPLAY_NAME = "New User"


class AccountSnapshot(BaseModel):
    """Account fields as delivered by an identity-store ``created`` event."""

    uid: str = Field(min_length=1)
    display_name: str | None = Field(default=None, alias="displayName")
    email: str | None = None
    avatar_url: str | None = Field(default=None, alias="photoURL")

    model_config = ConfigDict(populate_by_name=True)


class SetUserRoleRequest(BaseModel):
    uid: str = Field(min_length=1)
    new_role: Role = Field(alias="newRole")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ToggleUserStatusRequest(BaseModel):
    uid: str = Field(min_length=1)
    disabled: StrictBool

    model_config = ConfigDict(extra="ignore")


class DeleteUserRequest(BaseModel):
    uid: str = Field(min_length=1)

    model_config = ConfigDict(extra="ignore")


class CommandResult(BaseModel):
    message: str


class UserProfile(BaseModel):
    uid: str
    display_name: str = Field(serialization_alias="displayName")
    email: str | None = None
    avatar_url: str | None = Field(default=None, serialization_alias="photoURL")
    created_at: str | None = Field(default=None, serialization_alias="createdAt")
    role: Role
    disabled: bool


class UserListResponse(BaseModel):
    users: list[UserProfile]
