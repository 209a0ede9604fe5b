from hostel_leave.models.user import User


def can_access_student(user: User, student_id: str) -> bool:
    """Admins can see every student; a student only sees their own records."""
    return user.is_admin or user.user_id == student_id
