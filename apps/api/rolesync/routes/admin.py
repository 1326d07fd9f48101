"""Admin user-management routes."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from rolesync.routes.dependencies import get_admin_gateway, get_auth_context
from rolesync.schemas.auth import AuthContext
from rolesync.schemas.directory import CommandResult, UserListResponse
from rolesync.schemas.error import (
    ErrorResponse,
    InternalErrorResponse,
    InvalidArgumentResponse,
    PermissionDeniedResponse,
)
from rolesync.services.admin_gateway import AdminCommandGateway

router = APIRouter(prefix="/admin/users", tags=["Admin"])

_COMMAND_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": InvalidArgumentResponse},
    401: {"model": ErrorResponse},
    403: {"model": PermissionDeniedResponse},
    500: {"model": InternalErrorResponse},
}


async def _read_payload(request: Request) -> Any:
    """Parse the JSON body only after the caller has been authenticated."""
    try:
        return await request.json()
    except Exception:
        return None


@router.post("/role", response_model=CommandResult, responses=_COMMAND_RESPONSES)
async def set_user_role(
    request: Request,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    gateway: Annotated[AdminCommandGateway, Depends(get_admin_gateway)],
) -> CommandResult:
    return gateway.set_user_role(auth=auth, payload=await _read_payload(request))


@router.post("/status", response_model=CommandResult, responses=_COMMAND_RESPONSES)
async def toggle_user_status(
    request: Request,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    gateway: Annotated[AdminCommandGateway, Depends(get_admin_gateway)],
) -> CommandResult:
    return gateway.toggle_user_status(auth=auth, payload=await _read_payload(request))


@router.post("/delete", response_model=CommandResult, responses=_COMMAND_RESPONSES)
async def delete_user(
    request: Request,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    gateway: Annotated[AdminCommandGateway, Depends(get_admin_gateway)],
) -> CommandResult:
    return gateway.delete_user(auth=auth, payload=await _read_payload(request))


@router.get(
    "",
    response_model=UserListResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": PermissionDeniedResponse},
        500: {"model": InternalErrorResponse},
    },
)
async def get_all_users(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    gateway: Annotated[AdminCommandGateway, Depends(get_admin_gateway)],
) -> UserListResponse:
    return gateway.get_all_users(auth=auth)
