from pydantic import Field, field_validator
from typing import List, Optional

from schemas.base import CamelModel, check_email


class InviteRequest(CamelModel):
    recipients: List[str] = Field(..., min_length=1)
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("recipients")
    @classmethod
    def valid_recipients(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(check_email(email) for email in value))


class ShareRequest(CamelModel):
    email: str
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return check_email(value)


class InviteResult(CamelModel):
    email: str
    success: bool
    message: str


class InviteResponse(CamelModel):
    message: str
    results: List[InviteResult]
    success_count: int
    total_count: int


class ShareResponse(CamelModel):
    success: bool
    message: str


class ShareLinkResponse(CamelModel):
    url: str
    qr_code: str
