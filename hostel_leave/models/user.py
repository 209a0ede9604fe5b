"""User model for hostel residents and wardens."""

import uuid
from sqlalchemy import Column, String, Boolean, Enum

from hostel_leave.constants.constants import UserRole
from hostel_leave.models.base import Base, TimestampMixin

class User(Base, TimestampMixin):
    __tablename__ = "users"
    user_id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.student)
    room_number = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    roll_no = Column(String, nullable=True)
    profile_completed = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
