from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
import jwt

from zenith.core.config import settings
from zenith.core.exceptions import UnauthorizedError
from zenith.schemas.auth import TokenPayload


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def create_access_token(
    username: str,
    role: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    user_id: Optional[int] = None,
) -> Tuple[str, datetime]:
    """Create a signed JWT whose subject is the username.

    ``uid`` carries the account id; ``sub`` alone can later name another user.
    Expiry is fixed at issuance; tokens are never extended.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    issued_at = datetime.now(timezone.utc)
    expire = issued_at + expires_delta
    to_encode = {"sub": username, "iat": issued_at, "exp": expire}
    if role:
        to_encode["role"] = role
    if user_id is not None:
        to_encode["uid"] = user_id

    token = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, expire


def decode_access_token(token: str) -> TokenPayload:
    """Verify signature and expiry; raise UnauthorizedError otherwise."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except (jwt.PyJWTError, ValueError):
        raise UnauthorizedError("Could not validate credentials")
