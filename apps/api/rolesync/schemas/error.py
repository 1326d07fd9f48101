"""API error response schemas."""

from typing import Any, Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class PermissionDeniedResponse(BaseModel):
    code: Literal["PERMISSION_DENIED"]
    message: str


class InvalidArgumentResponse(BaseModel):
    code: Literal["INVALID_ARGUMENT"]
    message: str
    details: dict[str, Any] | None = None


class InternalErrorResponse(BaseModel):
    code: Literal["INTERNAL"]
    message: str
