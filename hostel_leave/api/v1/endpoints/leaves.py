"""Leave application router: submission, review and analytics."""

import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_leave.constants.constants import LeaveStatus
from hostel_leave.core.database import aget_db
from hostel_leave.core.exceptions import AuthorizationError, TransientStoreError
from hostel_leave.core.security import get_current_admin, get_current_user
from hostel_leave.models.user import User
from hostel_leave.schemas.leaveSchema import LeaveReviewRequest
from hostel_leave.services.LeaveAnalyticsService import (
    compute_admin_analytics,
    compute_admin_summary,
    compute_student_analytics,
)
from hostel_leave.services.LeaveApplicationService import (
    list_leaves,
    list_student_leaves,
    review_leave_application,
    submit_leave_application,
)
from hostel_leave.utils.check_access import can_access_student
from hostel_leave.utils.formatters import format_leave

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/leaves",
    tags=["leaves"]
)


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply_leave(
    payload: dict = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Submit a leave application.
    The body is validated as a whole before anything is stored; a valid
    application is saved with status Pending.
    """
    try:
        leave = await submit_leave_application(db, payload, current_user)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error saving leave application: {str(e)}", exc_info=True)
        raise TransientStoreError()

    return {
        "success": True,
        "message": "Leave applied successfully",
        "leave": format_leave(leave)
    }


@router.get("/admin-summary")
async def get_admin_summary(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db)
):
    """Status counts for the reporting period and the latest applications."""
    try:
        return await compute_admin_summary(db)
    except SQLAlchemyError as e:
        logger.error(f"Error computing admin summary: {str(e)}", exc_info=True)
        raise TransientStoreError()


@router.get("/admin-analytics")
async def get_admin_analytics(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db)
):
    """Monthly requests, leave reasons and top students across the hostel."""
    try:
        return await compute_admin_analytics(db)
    except SQLAlchemyError as e:
        logger.error(f"Error computing admin analytics: {str(e)}", exc_info=True)
        raise TransientStoreError()


@router.get("/student/{student_id}")
async def get_student_analytics(
    student_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """
    Leave history of one student.
    Students can only open their own page. Unknown students get zeroed data.
    """
    if not can_access_student(current_user, student_id):
        raise AuthorizationError("You can only view your own leave analytics")

    try:
        return await compute_student_analytics(db, student_id)
    except SQLAlchemyError as e:
        logger.error(f"Error computing analytics for {student_id}: {str(e)}", exc_info=True)
        raise TransientStoreError()


@router.get("/my-leaves")
async def get_my_leaves(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(aget_db)
):
    """Applications filed under the current user's student ID, newest first."""
    try:
        leaves = await list_student_leaves(db, current_user.user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching leaves for {current_user.user_id}: {str(e)}", exc_info=True)
        raise TransientStoreError()

    return {
        "success": True,
        "leaves": [format_leave(leave) for leave in leaves]
    }


@router.get("/all")
async def get_all_leaves(
    status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db)
):
    """All applications for the admin review queue, optionally by status."""
    try:
        leaves, total = await list_leaves(db, status_filter, limit=limit, offset=offset)
    except SQLAlchemyError as e:
        logger.error(f"Error listing leaves: {str(e)}", exc_info=True)
        raise TransientStoreError()

    return {
        "success": True,
        "leaves": [format_leave(leave) for leave in leaves],
        "total": total
    }


@router.patch("/{leave_id}/status")
async def review_leave(
    leave_id: str,
    review_data: LeaveReviewRequest,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db)
):
    """
    Approve or reject a pending leave.
    Approved and Rejected are final; repeating the same decision is accepted.
    """
    try:
        leave = await review_leave_application(
            db,
            leave_id,
            review_data.status,
            reviewer=current_user,
            note=review_data.note
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error reviewing leave {leave_id}: {str(e)}", exc_info=True)
        raise TransientStoreError()

    return {
        "success": True,
        "message": f"Leave {leave.status.value.lower()}",
        "leave": format_leave(leave)
    }
