from pydantic import Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from schemas.base import CamelModel, to_naive_utc


class OfferCreate(CamelModel):
    text: str = Field(..., min_length=1, max_length=500)
    percentage: int = Field(..., ge=1, le=100)
    start_date: datetime
    expiry_date: Optional[datetime] = None
    link_to_all_events: bool = False

    @field_validator("start_date", "expiry_date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def expiry_after_start(self):
        if self.expiry_date is not None and self.expiry_date < self.start_date:
            raise ValueError("Expiry date must be after start date")
        return self

    def fields(self) -> dict:
        return self.model_dump(exclude={"link_to_all_events"})


class OfferResponse(CamelModel):
    id: str
    business_partner_id: str
    text: str
    percentage: int
    start_date: datetime
    expiry_date: Optional[datetime] = None
    status: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_offer(cls, offer, status: str) -> "OfferResponse":
        return cls.model_validate(offer).model_copy(update={"status": status})
