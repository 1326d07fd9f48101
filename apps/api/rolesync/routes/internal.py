"""Internal account registration and lifecycle event routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from rolesync.routes.dependencies import (
    get_account_registration_service,
    get_lifecycle_service,
    require_event_secret,
)
from rolesync.schemas.directory import AccountSnapshot
from rolesync.schemas.error import ErrorResponse, InternalErrorResponse
from rolesync.schemas.internal import AccountDeletedEvent, RegisterAccountRequest, RegisterAccountResponse
from rolesync.services.accounts import AccountRegistrationService
from rolesync.services.lifecycle import LifecycleEventService

router = APIRouter(prefix="/internal/accounts", tags=["Internal"])

_EVENT_RESPONSES = {
    204: {"description": "Event applied"},
    401: {"model": ErrorResponse},
    500: {"model": InternalErrorResponse},
}


@router.post("/created", status_code=status.HTTP_204_NO_CONTENT, responses=_EVENT_RESPONSES)
async def account_created(
    payload: AccountSnapshot,
    __: Annotated[None, Depends(require_event_secret)],
    lifecycle: Annotated[LifecycleEventService, Depends(get_lifecycle_service)],
) -> Response:
    lifecycle.handle_created(payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/deleted", status_code=status.HTTP_204_NO_CONTENT, responses=_EVENT_RESPONSES)
async def account_deleted(
    payload: AccountDeletedEvent,
    __: Annotated[None, Depends(require_event_secret)],
    lifecycle: Annotated[LifecycleEventService, Depends(get_lifecycle_service)],
) -> Response:
    lifecycle.handle_deleted(payload.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterAccountResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": InternalErrorResponse}},
)
async def register_account(
    payload: RegisterAccountRequest,
    __: Annotated[None, Depends(require_event_secret)],
    accounts: Annotated[AccountRegistrationService, Depends(get_account_registration_service)],
) -> RegisterAccountResponse:
    return accounts.register(payload)
