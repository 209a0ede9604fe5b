"""Read-only leave analytics for the admin dashboard and student pages.

Every figure is recomputed from the leave table on each call; an unknown
student simply has no rows and gets a zeroed result.
"""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_leave.constants.constants import LeaveStatus, MONTHS_IN_YEAR
from hostel_leave.core.config import settings
from hostel_leave.models.leave import LeaveRequest
from hostel_leave.models.user import User
from hostel_leave.utils.formatters import format_leave

logger = logging.getLogger(__name__)


def empty_monthly_requests() -> List[int]:
    return [0] * MONTHS_IN_YEAR


def bucket_by_month(start_dates: Iterable[date], year: int) -> List[int]:
    """Count dates per calendar month of ``year``; index 0 is January."""
    monthly = empty_monthly_requests()
    for start_date in start_dates:
        if start_date.year == year:
            monthly[start_date.month - 1] += 1
    return monthly


def rank_leave_reasons(counts: Iterable[Tuple[str, int]]) -> List[Dict]:
    """Order leave types by count (desc), then name."""
    ranked = sorted(counts, key=lambda item: (-item[1], item[0]))
    return [{"reason": reason, "count": count} for reason, count in ranked]


def rank_top_students(leaves: Iterable, limit: int) -> List[Dict]:
    """
    Rank students by number of applications (leave rows or ORM objects).

    Ties are broken by ascending student ID. The displayed name is taken from
    the student's most recent application.
    """
    per_student: Dict[str, Dict] = {}
    for leave in leaves:
        entry = per_student.setdefault(leave.student_id, {
            "count": 0,
            "leave_types": set(),
            "name": leave.name,
            "latest": leave.created_at,
        })
        entry["count"] += 1
        entry["leave_types"].add(leave.leave_type)
        if leave.created_at and (entry["latest"] is None or leave.created_at >= entry["latest"]):
            entry["latest"] = leave.created_at
            entry["name"] = leave.name

    ranked = sorted(per_student.items(), key=lambda item: (-item[1]["count"], item[0]))
    return [
        {
            "student": {"studentId": student_id, "name": entry["name"]},
            "leaveCount": entry["count"],
            "leaveTypes": sorted(entry["leave_types"]),
        }
        for student_id, entry in ranked[:limit]
    ]


def summarize_status_counts(counts: Iterable[Tuple[LeaveStatus, int]]) -> Dict[str, int]:
    stats = {"total": 0, "approved": 0, "pending": 0, "rejected": 0}
    for status, count in counts:
        stats[LeaveStatus(status).name] += count
    stats["total"] = stats["approved"] + stats["pending"] + stats["rejected"]
    return stats


def _month_start(now: datetime) -> datetime:
    return datetime(now.year, now.month, 1)


async def _monthly_requests(
    db: AsyncSession,
    year: int,
    student_id: Optional[str] = None
) -> List[int]:
    query = select(LeaveRequest.start_date).where(
        LeaveRequest.start_date >= date(year, 1, 1),
        LeaveRequest.start_date <= date(year, 12, 31)
    )
    if student_id is not None:
        query = query.where(LeaveRequest.student_id == student_id)
    result = await db.execute(query)
    return bucket_by_month(result.scalars().all(), year)


async def _leave_reasons(db: AsyncSession, student_id: Optional[str] = None) -> List[Dict]:
    query = (
        select(LeaveRequest.leave_type, func.count(LeaveRequest.leave_id))
        .group_by(LeaveRequest.leave_type)
    )
    if student_id is not None:
        query = query.where(LeaveRequest.student_id == student_id)
    result = await db.execute(query)
    return rank_leave_reasons(result.all())


async def compute_admin_summary(db: AsyncSession) -> Dict:
    """
    Status counts plus the latest activity for the admin dashboard.

    Counts cover applications created this calendar month unless
    ``SUMMARY_SCOPE`` is ``"all"``. ``recent`` is newest first and capped at
    ``RECENT_ACTIVITY_LIMIT``.
    """
    counts_query = (
        select(LeaveRequest.status, func.count(LeaveRequest.leave_id))
        .group_by(LeaveRequest.status)
    )
    if settings.SUMMARY_SCOPE == "month":
        counts_query = counts_query.where(
            LeaveRequest.created_at >= _month_start(datetime.utcnow())
        )
    counts_result = await db.execute(counts_query)
    stats = summarize_status_counts(counts_result.all())
    logger.debug(f"Admin summary counts ({settings.SUMMARY_SCOPE}): {stats}")

    recent_result = await db.execute(
        select(LeaveRequest)
        .order_by(LeaveRequest.created_at.desc(), LeaveRequest.leave_id)
        .limit(settings.RECENT_ACTIVITY_LIMIT)
    )
    recent = [format_leave(leave) for leave in recent_result.scalars().all()]

    return {"stats": stats, "recent": recent}


async def compute_admin_analytics(db: AsyncSession) -> Dict:
    """Monthly volume for the current year, reason breakdown and top requesters."""
    year = datetime.utcnow().year
    monthly_requests = await _monthly_requests(db, year)
    leave_reasons = await _leave_reasons(db)

    # Only the fields the ranking needs
    top_query = await db.execute(
        select(
            LeaveRequest.student_id,
            LeaveRequest.name,
            LeaveRequest.leave_type,
            LeaveRequest.created_at
        )
    )
    top_students = rank_top_students(top_query.all(), settings.TOP_STUDENTS_LIMIT)

    return {
        "monthlyRequests": monthly_requests,
        "leaveReasons": leave_reasons,
        "topStudents": top_students,
    }


async def _student_profile(db: AsyncSession, student_id: str) -> Dict[str, str]:
    user = await db.get(User, student_id)
    if user:
        return {
            "name": user.name,
            "rollNo": user.roll_no or user.user_id,
            "roomNo": user.room_number or "",
        }

    latest_query = await db.execute(
        select(LeaveRequest)
        .where(LeaveRequest.student_id == student_id)
        .order_by(LeaveRequest.created_at.desc())
        .limit(1)
    )
    latest = latest_query.scalar_one_or_none()
    if latest:
        return {"name": latest.name, "rollNo": latest.student_id, "roomNo": latest.room_number}

    return {"name": "", "rollNo": "", "roomNo": ""}


async def compute_student_analytics(db: AsyncSession, student_id: str) -> Dict:
    """Profile header, monthly volume and reason breakdown for one student."""
    year = datetime.utcnow().year
    student = await _student_profile(db, student_id)
    monthly_requests = await _monthly_requests(db, year, student_id=student_id)
    leave_reasons = await _leave_reasons(db, student_id=student_id)

    return {
        "student": student,
        "monthlyRequests": monthly_requests,
        "leaveReasons": leave_reasons,
    }
