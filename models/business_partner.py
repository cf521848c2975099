from sqlalchemy import Column, String, DateTime, Date, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from database.connection import Base
from models.interest import business_partner_interests
from models.event import event_participants


class BusinessPartner(Base):
    """
    BusinessPartner model - profile of the person or business hosting events
    Each user owns at most one profile; the profile owns events and offers
    """
    __tablename__ = "business_partners"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    contact_number = Column(String, nullable=False)
    sex = Column(String, nullable=False)
    dob = Column(Date, nullable=False)
    info = Column(String, nullable=True)
    id_number = Column(String, nullable=True)
    id_verified = Column(Boolean, default=False)
    is_business = Column(Boolean, default=False)
    current_city = Column(String, nullable=True)
    relationship_status = Column(String, nullable=True)
    looking_for = Column(String, nullable=True)
    social_info = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="business_partner")
    interests = relationship("Interest", secondary=business_partner_interests)
    events = relationship("Event", back_populates="host", cascade="all, delete-orphan")
    offers = relationship("Offer", back_populates="business_partner", cascade="all, delete-orphan")
    registrations = relationship("Event", secondary=event_participants, back_populates="participants")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<BusinessPartner(name={self.full_name}, user_id={self.user_id})>"
