from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, Enum, Table
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum

from database.connection import Base


class EventStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Currency(str, enum.Enum):
    INR = "INR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    AUD = "AUD"


event_participants = Table(
    "event_participants",
    Base.metadata,
    Column("event_id", String, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("business_partner_id", String, ForeignKey("business_partners.id", ondelete="CASCADE"), primary_key=True),
)


class Event(Base):
    """
    Event model - an event hosted by a business partner

    `status` only ever moves from active to cancelled.
    Upcoming/past/draft listing categories are derived from the dates and
    `draft_mode` at read time and are not stored.
    """
    __tablename__ = "events"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    host_id = Column(String, ForeignKey("business_partners.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    banner_image = Column(String, nullable=True)
    location = Column(String, nullable=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    max_participants = Column(Integer, nullable=False, default=50)
    price = Column(Integer, default=0)
    currency = Column(Enum(Currency), default=Currency.INR)
    require_id_verification = Column(Boolean, default=False)
    draft_mode = Column(Boolean, default=False)
    status = Column(Enum(EventStatus), default=EventStatus.ACTIVE, nullable=False)
    cancellation_reason = Column(String, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    offer_id = Column(String, ForeignKey("offers.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    host = relationship("BusinessPartner", back_populates="events")
    offer = relationship("Offer", back_populates="events")
    participants = relationship("BusinessPartner", secondary=event_participants, back_populates="registrations")

    @property
    def current_participants(self) -> int:
        return len(self.participants)

    def __repr__(self):
        return f"<Event(name={self.name}, status={self.status})>"
