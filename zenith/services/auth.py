from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from zenith.core import security
from zenith.core.exceptions import UnauthorizedError, ValidationError
from zenith.models import Role, User
from zenith.schemas.auth import AuthResponse, PasswordReset, UserLogin, UserRegister
from zenith.services.authorization import Actor
from zenith.services.user import UserService
from zenith.utils.logger import auth_logger

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    @staticmethod
    def issue_token(user: User) -> AuthResponse:
        token, expires_at = security.create_access_token(
            user.username, role=Role(user.role).value, user_id=user.id
        )
        expires_in = int((expires_at - datetime.now(timezone.utc)).total_seconds())
        return AuthResponse(token=token, expires_at=expires_at, expires_in=max(expires_in, 0))

    @classmethod
    def register(cls, db: Session, user_data: UserRegister) -> AuthResponse:
        """Create a USER account and sign the new user in."""
        UserService.ensure_unique(db, username=user_data.username, email=user_data.email)

        user = User(
            username=user_data.username,
            email=user_data.email,
            password=security.get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            role=Role.USER,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        auth_logger.success("User registered", "REGISTER", user_id=user.id, username=user.username)
        return cls.issue_token(user)

    @classmethod
    def authenticate(cls, db: Session, identifier: str, password: str, by_email: bool = False) -> User:
        if by_email:
            user = UserService.get_user_by_email(db, identifier)
        else:
            user = UserService.get_user_by_username(db, identifier)

        if user is None or not security.verify_password(password, user.password):
            auth_logger.warning("Login rejected", "LOGIN", identifier=identifier)
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return user

    @classmethod
    def login(cls, db: Session, credentials: UserLogin) -> AuthResponse:
        """Sign in by username, or by email when no username is given."""
        username = (credentials.username or "").strip()
        email = (credentials.email or "").strip()

        if username:
            user = cls.authenticate(db, username, credentials.password)
        elif email:
            user = cls.authenticate(db, email, credentials.password, by_email=True)
        else:
            raise ValidationError("Username or email must be provided")

        auth_logger.success("User logged in", "LOGIN", user_id=user.id)
        return cls.issue_token(user)

    @classmethod
    def login_with_form(cls, db: Session, identifier: str, password: str) -> AuthResponse:
        """OAuth2 password form login; the username field may hold an email."""
        user = cls.authenticate(db, identifier, password, by_email="@" in identifier)
        return cls.issue_token(user)

    @staticmethod
    def reset_password(db: Session, actor: Actor, reset_data: PasswordReset) -> None:
        user = db.query(User).filter(User.id == actor.user_id).first()
        if user is None:
            raise UnauthorizedError("Could not validate credentials")

        if not security.verify_password(reset_data.old_password, user.password):
            raise ValidationError("Old password is incorrect")
        if reset_data.new_password != reset_data.confirm_password:
            raise ValidationError("New password and confirm password do not match")

        user.password = security.get_password_hash(reset_data.new_password)
        db.commit()
        auth_logger.info("Password changed", "RESET", user_id=user.id)

    @staticmethod
    def resolve_actor(db: Session, token: Optional[str]) -> Optional[Actor]:
        """
        Turn a bearer token into the acting identity.

        Args:
            db: Database session
            token: Raw token from the Authorization header, or None

        Returns:
            Actor, or None when no token was sent

        Raises:
            UnauthorizedError: If the token is invalid, expired, or does not
                match the account it was issued for
        """
        if not token:
            return None

        payload = security.decode_access_token(token)
        user = UserService.get_user_by_username(db, payload.sub)
        # A renamed account frees its old username for someone else
        if user is None or user.id != payload.uid:
            raise UnauthorizedError("Could not validate credentials")
        # Role comes from the store so demotions apply before the token expires
        return Actor.from_user(user)
