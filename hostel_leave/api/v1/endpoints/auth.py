from datetime import timedelta
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from hostel_leave.constants.constants import AUTH_COOKIE_NAME, UserRole
from hostel_leave.core.config import settings
from hostel_leave.core.database import aget_db
from hostel_leave.core.exceptions import AuthenticationError, ConflictError, TransientStoreError
from hostel_leave.core.rate_limit import limiter, login_rate_limit
from hostel_leave.core.security import create_jwt_token, hash_password, verify_password
from hostel_leave.models.user import User
from hostel_leave.schemas.userSchema import LoginRequest, RegisterRequest
from hostel_leave.utils.formatters import format_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

# -----------------------------
# Cookie Helpers
# -----------------------------
def set_auth_cookie(response: Response, token: str, expires: timedelta):
    """Set auth cookie."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="none" if settings.COOKIE_SECURE else "lax",
        path="/",
        max_age=int(expires.total_seconds())
    )

def clear_auth_cookie(response: Response):
    """Clear auth cookie."""
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        path="/",
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="none" if settings.COOKIE_SECURE else "lax",
    )


def _is_admin_email(email: str) -> bool:
    return email.lower() in {admin_email.lower() for admin_email in settings.ADMIN_EMAILS}


# -----------------------------
# Register / Login / Logout
# -----------------------------
@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    db: AsyncSession = Depends(aget_db)
):
    """
    Create a student account.
    Addresses listed in ADMIN_EMAILS are registered as admins.
    """
    email = register_data.email.lower()
    try:
        existing = await db.execute(
            select(User).where(func.lower(User.email) == email)
        )
        if existing.scalar_one_or_none():
            raise ConflictError("An account with this email already exists")

        user = User(
            name=register_data.name,
            email=email,
            password_hash=hash_password(register_data.password),
            role=UserRole.admin if _is_admin_email(email) else UserRole.student,
            room_number=register_data.room_number,
            phone=register_data.phone,
            roll_no=register_data.roll_no,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)

    except IntegrityError:
        await db.rollback()
        raise ConflictError("An account with this email already exists")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Registration failed for {email}: {e}", exc_info=True)
        raise TransientStoreError()

    logger.info(f"Registered {user.role.value} account {user.user_id}")
    return {
        "success": True,
        "message": "Registration successful",
        "user": format_user(user)
    }


@router.post("/login")
@limiter.limit(login_rate_limit)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    db: AsyncSession = Depends(aget_db)
):
    """Verify credentials and start a cookie session."""
    email = login_data.email.lower()
    try:
        result = await db.execute(
            select(User).where(func.lower(User.email) == email)
        )
        user = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Login lookup failed for {email}: {e}", exc_info=True)
        raise TransientStoreError()

    if not user or not user.is_active or not verify_password(login_data.password, user.password_hash):
        logger.info(f"Failed login attempt for {email}")
        raise AuthenticationError("Invalid email or password")

    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_jwt_token(
        {"sub": user.user_id, "role": user.role.value},
        expires_delta=expires
    )
    set_auth_cookie(response, token, expires)

    return {
        "success": True,
        "message": "Login successful",
        "user": format_user(user),
        "access_token": token
    }


@router.get("/logout")
async def logout(response: Response):
    """End the cookie session."""
    clear_auth_cookie(response)
    return {
        "success": True,
        "message": "Logout successful"
    }
