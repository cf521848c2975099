from pydantic import Field, field_validator
from datetime import date, datetime
from typing import List, Literal, Optional
import re

from schemas.base import CamelModel


class ProfileCreate(CamelModel):
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    contact_number: str
    sex: Literal["M", "F", "Other"]
    dob: date
    info: Optional[str] = None
    id_number: Optional[str] = Field(None, min_length=12, max_length=16)
    is_business: bool = False
    current_city: Optional[str] = None
    relationship_status: Optional[str] = None
    looking_for: Optional[Literal["serious", "fun"]] = None
    social_info: Optional[str] = None
    interests: List[str] = []

    @field_validator("contact_number")
    @classmethod
    def ten_digits(cls, value: str) -> str:
        if not re.fullmatch(r"\d{10}", value):
            raise ValueError("Contact number must be 10 digits")
        return value

    @field_validator("interests")
    @classmethod
    def clean_interests(cls, value: List[str]) -> List[str]:
        return [name.strip() for name in value if name.strip()]


class ProfileResponse(CamelModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    contact_number: str
    sex: str
    dob: date
    info: Optional[str] = None
    id_number: Optional[str] = None
    id_verified: bool = False
    is_business: bool = False
    current_city: Optional[str] = None
    relationship_status: Optional[str] = None
    looking_for: Optional[str] = None
    social_info: Optional[str] = None
    interests: List[str] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("interests", mode="before")
    @classmethod
    def interest_names(cls, value):
        return [getattr(item, "name", item) for item in value]


class InterestResponse(CamelModel):
    id: str
    name: str


class ParticipantResponse(CamelModel):
    id: str
    first_name: str
    last_name: str
    current_city: Optional[str] = None
    is_business: bool = False
