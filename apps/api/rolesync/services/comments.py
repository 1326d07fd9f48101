"""Comment backend service layer."""

import logging
from typing import Any

from pydantic import ValidationError

from rolesync.errors import InvalidArgumentError
from rolesync.repositories.memory import InMemoryCommentStore
from rolesync.schemas.comment import Comment, SubmitCommentRequest, SubmitCommentResponse

logger = logging.getLogger(__name__)

_MISSING_FIELDS_MESSAGE = "Name, comment and pageIdentifier are required."


class CommentService:
    def __init__(self, store: InMemoryCommentStore) -> None:
        self._store = store

    def list_comments(self, *, page_id: str | None) -> list[Comment]:
        page_id = (page_id or "").strip()
        if not page_id:
            raise InvalidArgumentError("A 'pageIdentifier' query parameter is required.")
        return [
            Comment(name=record.name, comment=record.comment, timestamp=record.timestamp)
            for record in self._store.list_comments(page_id)
        ]

    def submit_comment(self, payload: Any) -> SubmitCommentResponse:
        """Store a comment; validation problems are reported in the response body."""
        if not isinstance(payload, dict):
            return SubmitCommentResponse(status="error", message="Request body must be a JSON object.")
        try:
            request = SubmitCommentRequest.model_validate(payload)
        except ValidationError:
            return SubmitCommentResponse(status="error", message=_MISSING_FIELDS_MESSAGE)

        name = (request.name or "").strip()
        body = (request.comment or "").strip()
        page_id = (request.page_identifier or "").strip()
        if not name or not body or not page_id:
            return SubmitCommentResponse(status="error", message=_MISSING_FIELDS_MESSAGE)

        self._store.add_comment(page_id=page_id, name=name, comment=body)
        logger.info("comments.submitted page_id=%s", page_id)
        return SubmitCommentResponse(status="success")
