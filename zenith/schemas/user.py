from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from zenith.models.enums import Role
from zenith.schemas.auth import UserRegister, clean_username
from zenith.schemas.base import BaseResponseSchema


class UserResponse(BaseResponseSchema):
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    role: Role
    post_count: int = 0
    comment_count: int = 0


class UserCreate(UserRegister):
    """Admin-side user creation with an explicit role."""
    bio: Optional[str] = None
    role: Role = Role.USER


class UserUpdate(BaseModel):
    """Partial profile update; fields left out are not touched."""
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = Field(None, max_length=100)
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: Optional[str]) -> Optional[str]:
        return clean_username(value)


class RoleUpdate(BaseModel):
    role: Role
