from pydantic import Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from models.event import Currency, EventStatus
from schemas.base import CamelModel, to_naive_utc


class EventCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    banner_image: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    max_participants: int = Field(50, gt=0)
    price: int = Field(0, ge=0)
    currency: Currency = Currency.INR
    require_id_verification: bool = False
    draft_mode: bool = False
    offer_id: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class EventUpdate(CamelModel):
    """Partial update: only the fields sent are changed"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    banner_image: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    max_participants: Optional[int] = Field(None, gt=0)
    price: Optional[int] = Field(None, ge=0)
    currency: Optional[Currency] = None
    require_id_verification: Optional[bool] = None
    draft_mode: Optional[bool] = None
    offer_id: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    def changes(self) -> dict:
        """Fields explicitly sent; nulls only survive for clearable fields"""
        clearable = {"description", "banner_image", "location", "offer_id"}
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in clearable
        }


class CancelRequest(CamelModel):
    reason: str = ""


class EventResponse(CamelModel):
    id: str
    host_id: str
    name: str
    description: Optional[str] = None
    banner_image: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    max_participants: int
    current_participants: int = 0
    price: int = 0
    currency: Currency = Currency.INR
    require_id_verification: bool = False
    draft_mode: bool = False
    status: EventStatus
    bucket: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    offer_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_event(cls, event, bucket: str) -> "EventResponse":
        return cls.model_validate(event).model_copy(update={"bucket": bucket})


class CancelResponse(CamelModel):
    message: str
    event: EventResponse
