from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from zenith.models.enums import PostStatus
from zenith.schemas.base import BaseResponseSchema
from zenith.schemas.taxonomy import TagName


class PostCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1)
    category_id: int = Field(..., validation_alias=AliasChoices("category_id", "categoryId"))
    tags: List[TagName] = Field(default_factory=list, description="Tag names, created when missing")
    tag_ids: List[int] = Field(default_factory=list, validation_alias=AliasChoices("tag_ids", "tagIds"))
    status: Optional[PostStatus] = None


class PostUpdate(BaseModel):
    """Blank strings and empty lists leave the current value in place."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, max_length=100)
    content: Optional[str] = None
    category_id: Optional[int] = Field(None, validation_alias=AliasChoices("category_id", "categoryId"))
    tags: Optional[List[TagName]] = None
    tag_ids: Optional[List[int]] = Field(None, validation_alias=AliasChoices("tag_ids", "tagIds"))


class PostResponse(BaseResponseSchema):
    title: str
    slug: str
    content: str
    status: PostStatus
    reading_time: int
    author_id: int
    author_username: Optional[str] = None
    category_id: int
    category_name: Optional[str] = None
    tags: List[str] = []
    tag_count: int = 0
    comment_count: int = 0
