from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import bcrypt

from database.connection import Base


class User(Base):
    """
    User model - login account of a business partner
    Password hashing uses bcrypt with automatic salt generation
    """
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=False, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    contact_number = Column(String, nullable=True)
    gst_number = Column(String, nullable=True)
    point_of_contact = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    business_partner = relationship(
        "BusinessPartner", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash password using bcrypt with a fresh salt"""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, password: str) -> bool:
        """
        Verify password against stored bcrypt hash
        Returns True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode('utf-8'),
                self.password_hash.encode('utf-8')
            )
        except ValueError:
            # Malformed hash
            return False

    def __repr__(self):
        return f"<User(email={self.email}, username={self.username})>"
