from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from database.connection import Base


class Offer(Base):
    """
    Offer model - percentage discount owned by a business partner

    Active/Expired is derived from `expiry_date` on every read and never
    stored. Events point at an offer through `Event.offer_id`.
    """
    __tablename__ = "offers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    business_partner_id = Column(String, ForeignKey("business_partners.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String, nullable=False)
    percentage = Column(Integer, nullable=False)
    start_date = Column(DateTime, nullable=False)
    expiry_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    business_partner = relationship("BusinessPartner", back_populates="offers")
    events = relationship("Event", back_populates="offer")

    def __repr__(self):
        return f"<Offer(text={self.text}, percentage={self.percentage})>"
