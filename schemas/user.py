from pydantic import Field, field_validator
from datetime import datetime
from typing import Optional
import re

from schemas.base import CamelModel, check_email

GST_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$")


class UserCreate(CamelModel):
    email: str
    username: str = Field(..., min_length=3, max_length=50)
    password: str
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    contact_number: Optional[str] = None
    gst_number: Optional[str] = None
    point_of_contact: Optional[str] = Field(None, min_length=3, max_length=100)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must include a number")
        if not re.search(r"[^a-zA-Z0-9]", value):
            raise ValueError("Password must include a symbol")
        return value

    @field_validator("contact_number")
    @classmethod
    def ten_digits(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not re.fullmatch(r"\d{10}", value):
            raise ValueError("Contact number must be 10 digits")
        return value

    @field_validator("gst_number")
    @classmethod
    def gst_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not GST_PATTERN.match(value):
            raise ValueError("Invalid GST number format")
        return value


class LoginRequest(CamelModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return check_email(value)


class ForgotPasswordRequest(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return check_email(value)


class UserResponse(CamelModel):
    id: str
    email: str
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    contact_number: Optional[str] = None
    gst_number: Optional[str] = None
    point_of_contact: Optional[str] = None
    created_at: datetime


class AuthResponse(CamelModel):
    success: bool
    token: str
    user: UserResponse
