"""Leave application model for hostel students."""

import uuid
from datetime import datetime
from sqlalchemy import Column, Date, ForeignKey, String, DateTime, Text, Enum
from hostel_leave.constants.constants import LeaveStatus
from hostel_leave.models.base import Base


class LeaveRequest(Base):
    """Model representing leave requests submitted by students.

    ``student_id`` is the identifier typed on the form. It usually matches a
    ``users.user_id`` but is not a foreign key, so applications filed for
    students without an account are still counted by the analytics.
    """

    __tablename__ = "leave_requests"
    leave_id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    room_number = Column(String, nullable=False)
    contact_number = Column(String, nullable=False)
    leave_type = Column(String, index=True, nullable=False)
    destination = Column(String, nullable=True)
    start_date = Column(Date, index=True, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(
        Enum(LeaveStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        default=LeaveStatus.pending,
        nullable=False,
        index=True
    )
    submitted_by = Column(String, ForeignKey("users.user_id"), nullable=True)
    reviewed_by = Column(String, ForeignKey("users.user_id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_note = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
