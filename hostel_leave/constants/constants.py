"""Constants for user roles, leave statuses and leave types."""

from enum import Enum


class UserRole(str, Enum):
    """Enumeration of user roles within the hostel."""

    student = "student"
    admin = "admin"


class LeaveStatus(str, Enum):
    """Enumeration of leave application statuses."""

    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


class LeaveType(str, Enum):
    """Leave types offered on the application form."""

    sick = "Sick Leave"
    casual = "Casual Leave"
    emergency = "Emergency Leave"
    vacation = "Vacation Leave"
    family_function = "Family Function Leave"
    festival = "Festival Leave"
    examination = "Examination Leave"
    personal = "Personal Leave"
    official = "Official Leave"
    other = "Other"


LEAVE_TYPE_VALUES = [leave_type.value for leave_type in LeaveType]

# Terminal review outcomes
REVIEW_STATUSES = [LeaveStatus.approved, LeaveStatus.rejected]

MONTHS_IN_YEAR = 12

AUTH_COOKIE_NAME = "auth_token"
