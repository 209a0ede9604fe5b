import re
from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from hostel_leave.constants.constants import LEAVE_TYPE_VALUES, LeaveStatus
from hostel_leave.core.config import settings


REQUIRED_FIELD_MESSAGES = {
    "student_id": "Student ID is required",
    "name": "Name is required",
    "room_number": "Room number is required",
    "leave_type": "Please select a leave type",
    "contact_number": "Contact number is required",
    "start_date": "Start date required",
    "end_date": "End date required",
    "reason": "Please provide a reason",
}

MIN_CONTACT_NUMBER_LENGTH = 10
ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class LeaveApplyRequest(BaseModel):
    """Leave application as posted by the apply form.

    Fields are declared in form order so the first reported error matches
    the first invalid input on the page.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", validate_default=True)

    student_id: str = Field(default="", alias="studentId")
    name: str = ""
    room_number: str = Field(default="", alias="roomNumber")
    leave_type: str = Field(default="", alias="leaveType")
    destination: Optional[str] = None
    contact_number: str = Field(default="", alias="contactNumber")
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")
    reason: str = ""

    @field_validator(*REQUIRED_FIELD_MESSAGES.keys(), mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value

    @field_validator(*REQUIRED_FIELD_MESSAGES.keys())
    @classmethod
    def required(cls, value: str, info):
        if len(value) < 1:
            raise ValueError(REQUIRED_FIELD_MESSAGES[info.field_name])
        return value

    @field_validator("contact_number")
    @classmethod
    def contact_number_length(cls, value: str):
        if len(value) < MIN_CONTACT_NUMBER_LENGTH:
            raise ValueError(REQUIRED_FIELD_MESSAGES["contact_number"])
        return value

    @field_validator("leave_type")
    @classmethod
    def known_leave_type(cls, value: str):
        if settings.STRICT_LEAVE_TYPES and value not in LEAVE_TYPE_VALUES:
            raise ValueError(f"Leave type must be one of: {', '.join(LEAVE_TYPE_VALUES)}")
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def iso_date(cls, value: str, info):
        label = "Start date" if info.field_name == "start_date" else "End date"
        message = f"{label} must be a valid date (YYYY-MM-DD)"
        # Only the dashed form; fromisoformat also takes "20240501"
        if not ISO_DATE_PATTERN.fullmatch(value):
            raise ValueError(message)
        try:
            date.fromisoformat(value)
        except ValueError:
            raise ValueError(message)
        return value

    @field_validator("destination", mode="before")
    @classmethod
    def blank_destination(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def start(self) -> date:
        return date.fromisoformat(self.start_date)

    @property
    def end(self) -> date:
        return date.fromisoformat(self.end_date)


class LeaveReviewRequest(BaseModel):
    """Request schema for approving or rejecting a leave."""
    status: LeaveStatus
    note: Optional[str] = Field(None, max_length=1000)
