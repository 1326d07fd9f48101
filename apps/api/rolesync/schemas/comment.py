"""Comment backend schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Comment(BaseModel):
    name: str
    comment: str
    timestamp: datetime


class SubmitCommentRequest(BaseModel):
    name: str | None = None
    comment: str | None = None
    page_identifier: str | None = Field(default=None, alias="pageIdentifier")

    model_config = ConfigDict(populate_by_name=True)


class SubmitCommentResponse(BaseModel):
    status: Literal["success", "error"]
    message: str | None = None
