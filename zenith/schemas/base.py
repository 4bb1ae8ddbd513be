from datetime import datetime
from typing import Any, Dict, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema for all models."""
    model_config = ConfigDict(from_attributes=True)


class BaseResponseSchema(BaseSchema):
    """Base response schema with common fields."""
    id: int
    created_at: datetime
    updated_at: datetime


class PageResponse(BaseModel, Generic[T]):
    """One page of results. ``page`` is 0-based."""
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str


# Error response schema
class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = {}


class ErrorResponse(BaseModel):
    status: int
    error: ErrorDetail
