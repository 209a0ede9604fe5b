"""Security utilities for password hashing and handling JWT session tokens."""

import logging
from typing import Optional
from datetime import datetime, timedelta
import bcrypt
import jwt
from .config import settings
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from hostel_leave.constants.constants import AUTH_COOKIE_NAME
from hostel_leave.core.database import aget_db
from hostel_leave.core.exceptions import AuthenticationError, AuthorizationError
from hostel_leave.models.user import User

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:BCRYPT_MAX_BYTES],
            password_hash.encode("utf-8")
        )
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_jwt_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a JWT (JSON Web Token) with the provided data and expiration time.

    Args:
        data (dict): The payload data to be encoded in the JWT.
        expires_delta (timedelta, optional): The time until the token expires.
            Defaults to ``settings.ACCESS_TOKEN_EXPIRE_MINUTES``.

    Returns:
        str: The encoded JWT string.

    Example:
        >>> token = create_jwt_token({"sub": "5f0c...", "role": "student"})

    Note:
        The token includes standard JWT claims:
        - exp (expiration time)
        - iat (issued at time)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = data.copy()
    now = datetime.utcnow()
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_jwt_token(token: str) -> dict:
    """Decodes and validates a JWT token.

    Args:
        token (str): The JWT token string to decode.

    Returns:
        dict: The decoded token payload containing the claims.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or improperly formatted.
    """
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM]
    )


def _extract_token(request: Request) -> Optional[str]:
    """An explicit ``Authorization: Bearer`` header wins over the session cookie."""
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    return request.cookies.get(AUTH_COOKIE_NAME)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(aget_db)
) -> User:
    """
    Dependency to get current authenticated user from the JWT cookie or bearer header
    Raises 401 if not authenticated
    """
    token = _extract_token(request)

    if not token:
        raise AuthenticationError("Not authenticated")

    try:
        payload = decode_jwt_token(token)
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected session token: {e}")
        raise AuthenticationError("Invalid authentication token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token")

    result = await db.execute(
        select(User).where(User.user_id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise AuthenticationError("User not found")

    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Dependency that only lets admins through. Raises 403 otherwise."""
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user
