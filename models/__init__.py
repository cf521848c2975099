from database.connection import Base
from models.user import User
from models.interest import Interest, business_partner_interests
from models.event import Event, EventStatus, Currency, event_participants
from models.offer import Offer
from models.business_partner import BusinessPartner

__all__ = [
    "Base", "User", "Interest", "business_partner_interests", "Event", "EventStatus",
    "Currency", "event_participants", "Offer", "BusinessPartner",
]
