"""Comment backend routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request

from rolesync.routes.dependencies import get_comment_service
from rolesync.schemas.comment import Comment, SubmitCommentResponse
from rolesync.schemas.error import InvalidArgumentResponse
from rolesync.services.comments import CommentService

router = APIRouter(prefix="/comments", tags=["Comments"])


async def _read_payload(request: Request) -> Any:
    # The widget posts JSON as text/plain, so the body is parsed regardless of content type.
    try:
        return await request.json()
    except Exception:
        return None


@router.get("", response_model=list[Comment], responses={400: {"model": InvalidArgumentResponse}})
async def list_comments(
    service: Annotated[CommentService, Depends(get_comment_service)],
    page_identifier: Annotated[str | None, Query(alias="pageIdentifier")] = None,
    page_id: Annotated[str | None, Query(alias="pageId")] = None,
) -> list[Comment]:
    return service.list_comments(page_id=page_identifier or page_id)


@router.post("", response_model=SubmitCommentResponse, response_model_exclude_none=True)
async def submit_comment(
    request: Request,
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> SubmitCommentResponse:
    return service.submit_comment(await _read_payload(request))
