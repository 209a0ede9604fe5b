"""Validation, submission and review of leave applications."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_leave.constants.constants import LeaveStatus, REVIEW_STATUSES
from hostel_leave.core.exceptions import (
    AuthorizationError,
    ConflictError,
    LeaveValidationError,
    NotFoundError,
)
from hostel_leave.models.leave import LeaveRequest
from hostel_leave.models.user import User
from hostel_leave.schemas.leaveSchema import LeaveApplyRequest

logger = logging.getLogger(__name__)

END_BEFORE_START_MESSAGE = "End date must be same or after start date"


def _field_errors(exc: ValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into ``[{field, message}]`` keyed by the JSON name."""
    fields = LeaveApplyRequest.model_fields
    errors = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "body"
        # Defaulted fields are reported under the attribute name
        if field in fields and fields[field].alias:
            field = fields[field].alias
        ctx_error = error.get("ctx", {}).get("error")
        message = str(ctx_error) if ctx_error else error["msg"]
        errors.append({"field": field, "message": message})
    return errors


def validate_leave_application(payload: dict) -> LeaveApplyRequest:
    """
    Validate a raw leave application.

    Field checks run first; the date ordering check only runs once every
    field is individually valid and is reported against ``endDate``.

    Raises:
        LeaveValidationError: with every failing field, first one as message.
    """
    try:
        application = LeaveApplyRequest.model_validate(payload)
    except ValidationError as exc:
        raise LeaveValidationError(_field_errors(exc))

    if application.start > application.end:
        raise LeaveValidationError([
            {"field": "endDate", "message": END_BEFORE_START_MESSAGE}
        ])

    return application


async def submit_leave_application(
    db: AsyncSession,
    payload: dict,
    current_user: User
) -> LeaveRequest:
    """
    Validate and store a new leave application with status Pending.

    Students can only apply for themselves; admins may file on behalf of any
    student. Nothing is written unless validation passes.
    """
    application = validate_leave_application(payload)

    if not current_user.is_admin and application.student_id != current_user.user_id:
        raise AuthorizationError("You can only apply for leave for your own student ID")

    leave = LeaveRequest(
        student_id=application.student_id,
        name=application.name,
        room_number=application.room_number,
        contact_number=application.contact_number,
        leave_type=application.leave_type,
        destination=application.destination,
        start_date=application.start,
        end_date=application.end,
        reason=application.reason,
        status=LeaveStatus.pending,
        submitted_by=current_user.user_id,
        created_at=datetime.utcnow(),
    )
    db.add(leave)
    await db.commit()
    await db.refresh(leave)

    logger.info(
        f"Leave {leave.leave_id} submitted for student {leave.student_id} "
        f"({leave.leave_type}, {leave.start_date} -> {leave.end_date})"
    )
    return leave


async def review_leave_application(
    db: AsyncSession,
    leave_id: str,
    decision: LeaveStatus,
    reviewer: User,
    note: Optional[str] = None
) -> LeaveRequest:
    """
    Approve or reject a pending leave.

    The status change is a single conditional UPDATE on ``status = Pending``,
    so of two concurrent reviews only the first one lands. Repeating the
    decision that already landed is a no-op; a different decision on a
    closed leave raises ConflictError.
    """
    if decision not in REVIEW_STATUSES:
        raise LeaveValidationError([
            {"field": "status", "message": "Status must be either 'Approved' or 'Rejected'"}
        ])

    now = datetime.utcnow()
    result = await db.execute(
        update(LeaveRequest)
        .where(
            LeaveRequest.leave_id == leave_id,
            LeaveRequest.status == LeaveStatus.pending
        )
        .values(
            status=decision,
            reviewed_by=reviewer.user_id,
            reviewed_at=now,
            review_note=note,
            updated_at=now
        )
    )
    await db.commit()

    leave_query = await db.execute(
        select(LeaveRequest)
        .where(LeaveRequest.leave_id == leave_id)
        .execution_options(populate_existing=True)
    )
    leave = leave_query.scalar_one_or_none()

    if not leave:
        raise NotFoundError("Leave request not found")

    if result.rowcount == 0:
        if leave.status != decision:
            raise ConflictError(
                f"This leave request has already been {leave.status.value.lower()}"
            )
        logger.info(f"Leave {leave_id} already {decision.value}; nothing to change")
    else:
        logger.info(f"Leave {leave_id} {decision.value.lower()} by {reviewer.user_id}")

    return leave


async def list_student_leaves(db: AsyncSession, student_id: str) -> List[LeaveRequest]:
    """All applications of one student, newest first."""
    result = await db.execute(
        select(LeaveRequest)
        .where(LeaveRequest.student_id == student_id)
        .order_by(LeaveRequest.created_at.desc(), LeaveRequest.leave_id)
    )
    return list(result.scalars().all())


async def list_leaves(
    db: AsyncSession,
    status_filter: Optional[LeaveStatus] = None,
    limit: int = 50,
    offset: int = 0
) -> Tuple[List[LeaveRequest], int]:
    """Page through all applications, newest first. Returns (page, total)."""
    query = select(LeaveRequest)
    count_query = select(func.count(LeaveRequest.leave_id))
    if status_filter:
        query = query.where(LeaveRequest.status == status_filter)
        count_query = count_query.where(LeaveRequest.status == status_filter)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query
        .order_by(LeaveRequest.created_at.desc(), LeaveRequest.leave_id)
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total
