"""Internal lifecycle event schemas."""

from pydantic import BaseModel, ConfigDict, Field


class AccountDeletedEvent(BaseModel):
    uid: str = Field(min_length=1)


class RegisterAccountRequest(BaseModel):
    display_name: str | None = Field(default=None, alias="displayName")
    email: str | None = None
    avatar_url: str | None = Field(default=None, alias="photoURL")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RegisterAccountResponse(BaseModel):
    uid: str
