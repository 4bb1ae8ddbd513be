from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

# NOTE: email-validator is required by Pydantic for EmailStr validation


def clean_username(value: Optional[str]) -> Optional[str]:
    """Trim a username and enforce the minimum length on what is left."""
    if value is None:
        return value
    value = value.strip()
    if len(value) < 3:
        raise ValueError("Username must be at least 3 characters")
    return value


# Registration schemas
class UserRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr = Field(..., max_length=100)
    password: str = Field(..., min_length=8, max_length=72)
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        return clean_username(value)


# Login schemas
class UserLogin(BaseModel):
    """Either ``username`` or ``email`` identifies the account."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    expires_in: int  # seconds


# Token schemas
class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int


class TokenPayload(BaseModel):
    sub: str
    exp: int
    uid: Optional[int] = None
    role: Optional[str] = None


# Password reset schemas
class PasswordReset(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)
    confirm_password: str = Field(..., min_length=1)
