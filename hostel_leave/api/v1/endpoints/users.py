"""User profile router used by the apply form and profile pop-up."""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_leave.core.database import aget_db
from hostel_leave.core.exceptions import AuthorizationError, NotFoundError, TransientStoreError
from hostel_leave.core.security import get_current_user
from hostel_leave.models.user import User
from hostel_leave.schemas.userSchema import CompleteProfileRequest, ProfileUpdateRequest
from hostel_leave.utils.formatters import format_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/get-user/{userid}")
async def get_user(
    userid: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Fetch one user's public profile."""
    try:
        user = await db.get(User, userid)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user {userid}: {str(e)}", exc_info=True)
        raise TransientStoreError()

    if not user:
        raise NotFoundError("User not found")

    return {
        "success": True,
        "user": format_user(user)
    }


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    """Profile of the logged-in user."""
    return {
        "success": True,
        "user": format_user(current_user)
    }


@router.put("/update-user/{userid}")
async def update_user(
    userid: str,
    profile_data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Update user profile information
    All fields are optional - only provided fields will be updated.
    Users may edit themselves; admins may edit anyone.
    """
    if userid != current_user.user_id and not current_user.is_admin:
        raise AuthorizationError("You can only update your own profile")

    try:
        user = current_user if userid == current_user.user_id else await db.get(User, userid)
        if not user:
            raise NotFoundError("User not found")

        if profile_data.name is not None:
            user.name = profile_data.name

        if profile_data.room_number is not None:
            user.room_number = profile_data.room_number

        if profile_data.phone is not None:
            user.phone = profile_data.phone

        if profile_data.roll_no is not None:
            user.roll_no = profile_data.roll_no

        await db.commit()
        await db.refresh(user)

    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error updating user {userid}: {str(e)}", exc_info=True)
        raise TransientStoreError()

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": format_user(user)
    }


@router.post("/complete-profile")
async def complete_profile(
    profile_data: CompleteProfileRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Fill in the hostel details asked for on first login."""
    try:
        current_user.room_number = profile_data.room_number
        current_user.phone = profile_data.phone
        if profile_data.roll_no is not None:
            current_user.roll_no = profile_data.roll_no
        current_user.profile_completed = True

        await db.commit()
        await db.refresh(current_user)

    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error completing profile for {current_user.user_id}: {str(e)}", exc_info=True)
        raise TransientStoreError()

    return {
        "success": True,
        "message": "Profile completed successfully",
        "user": format_user(current_user)
    }
