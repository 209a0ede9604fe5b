from typing import Optional
from datetime import date

from hostel_leave.models.leave import LeaveRequest
from hostel_leave.models.user import User


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def format_leave(leave: LeaveRequest) -> dict:
    """JSON shape of a leave application as the web client reads it."""
    return {
        "_id": leave.leave_id,
        "studentId": leave.student_id,
        "name": leave.name,
        "studentName": leave.name,
        "roomNumber": leave.room_number,
        "contactNumber": leave.contact_number,
        "leaveType": leave.leave_type,
        "destination": leave.destination,
        "startDate": _iso(leave.start_date),
        "endDate": _iso(leave.end_date),
        "reason": leave.reason,
        "status": leave.status.value if leave.status else None,
        "reviewedBy": leave.reviewed_by,
        "reviewedAt": _iso(leave.reviewed_at),
        "reviewNote": leave.review_note,
        "createdAt": _iso(leave.created_at),
        "updatedAt": _iso(leave.updated_at),
    }


def format_user(user: User) -> dict:
    """Public profile fields; the password hash never leaves the server."""
    return {
        "_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value if user.role else None,
        "roomNumber": user.room_number,
        "phone": user.phone,
        "rollNo": user.roll_no,
        "profileCompleted": bool(user.profile_completed),
        "createdAt": _iso(user.created_at),
    }
