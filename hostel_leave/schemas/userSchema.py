from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    room_number: Optional[str] = Field(None, alias="roomNumber")
    phone: Optional[str] = None
    roll_no: Optional[str] = Field(None, alias="rollNo")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """All fields optional - only provided fields are updated."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    room_number: Optional[str] = Field(None, alias="roomNumber")
    phone: Optional[str] = Field(None, min_length=10)
    roll_no: Optional[str] = Field(None, alias="rollNo")


class CompleteProfileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_number: str = Field(..., min_length=1, alias="roomNumber")
    phone: str = Field(..., min_length=10)
    roll_no: Optional[str] = Field(None, alias="rollNo")
