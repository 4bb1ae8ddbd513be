from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from zenith.api.deps import get_current_actor
from zenith.db.session import get_db
from zenith.schemas.auth import AuthResponse, PasswordReset, Token, UserLogin, UserRegister
from zenith.schemas.base import MessageResponse
from zenith.services.auth import AuthService
from zenith.services.authorization import Actor

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(user_data: UserRegister, db: Session = Depends(get_db)) -> Any:
    """Create an account with role USER and return a token for it."""
    return AuthService.register(db=db, user_data=user_data)


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)) -> Any:
    """Log in with a username or an email plus password."""
    return AuthService.login(db=db, credentials=credentials)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> Any:
    """OAuth2 password flow for the Swagger UI "Authorize" dialog."""
    auth = AuthService.login_with_form(db=db, identifier=form_data.username, password=form_data.password)
    return Token(access_token=auth.token, token_type="bearer", expires_in=auth.expires_in)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    reset_data: PasswordReset,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> Any:
    AuthService.reset_password(db=db, actor=actor, reset_data=reset_data)
    return MessageResponse(message="Password updated successfully")
