from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from zenith.models.enums import CommentStatus
from zenith.schemas.base import BaseResponseSchema


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseResponseSchema):
    content: str
    status: CommentStatus
    post_id: int
    author_id: int
    author_username: Optional[str] = None


class BulkCommentStatusUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    comment_ids: List[int] = Field(..., min_length=1, validation_alias=AliasChoices("comment_ids", "commentIds"))
    status: CommentStatus
