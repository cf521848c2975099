from sqlalchemy import Column, String, ForeignKey, Table
import uuid

from database.connection import Base


business_partner_interests = Table(
    "business_partner_interests",
    Base.metadata,
    Column("business_partner_id", String, ForeignKey("business_partners.id", ondelete="CASCADE"), primary_key=True),
    Column("interest_id", String, ForeignKey("interests.id", ondelete="CASCADE"), primary_key=True),
)


class Interest(Base):
    __tablename__ = "interests"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, unique=True, nullable=False)

    def __repr__(self):
        return f"<Interest(name={self.name})>"
