"""Dict-backed store, substitutable for SqlStore in tests and local tooling.

Rows are plain transient model instances, so the services see the same
objects whichever store they run against.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from models import BusinessPartner, Event, EventStatus, Interest, Offer, User
from stores.interfaces import PortalStore


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStore(PortalStore):
    """In-memory PortalStore. Each instance is an isolated, empty store."""

    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.partners: Dict[str, BusinessPartner] = {}
        self.interests: Dict[str, Interest] = {}
        self.events: Dict[str, Event] = {}
        self.offers: Dict[str, Offer] = {}

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, data: Dict[str, Any]) -> User:
        user = User(id=_new_id(), created_at=datetime.utcnow(), **data)
        self.users[user.id] = user
        return user

    # Business partners

    def get_partner(self, partner_id: str) -> Optional[BusinessPartner]:
        return self.partners.get(partner_id)

    def get_partner_by_user_id(self, user_id: str) -> Optional[BusinessPartner]:
        return next((p for p in self.partners.values() if p.user_id == user_id), None)

    def _resolve_interests(self, names: List[str]) -> List[Interest]:
        interests = []
        for name in dict.fromkeys(names):
            interest = next((i for i in self.interests.values() if i.name == name), None)
            if interest is None:
                interest = Interest(id=_new_id(), name=name)
                self.interests[interest.id] = interest
            interests.append(interest)
        return interests

    def create_partner(self, data: Dict[str, Any], interests: List[str]) -> BusinessPartner:
        now = datetime.utcnow()
        partner = BusinessPartner(id=_new_id(), created_at=now, updated_at=now, **data)
        partner.interests = self._resolve_interests(interests)
        self.partners[partner.id] = partner
        return partner

    def update_partner(self, partner: BusinessPartner, data: Dict[str, Any],
                       interests: Optional[List[str]]) -> BusinessPartner:
        for key, value in data.items():
            setattr(partner, key, value)
        if interests is not None:
            partner.interests = self._resolve_interests(interests)
        partner.updated_at = datetime.utcnow()
        return partner

    def list_interests(self) -> List[Interest]:
        return sorted(self.interests.values(), key=lambda i: i.name)

    # Events

    def get_event(self, event_id: str) -> Optional[Event]:
        return self.events.get(event_id)

    def list_events_for_partner(self, partner_id: str) -> List[Event]:
        events = [e for e in self.events.values() if e.host_id == partner_id]
        return sorted(events, key=lambda e: e.start_date)

    def list_events_by_offer(self, offer_id: str) -> List[Event]:
        events = [e for e in self.events.values() if e.offer_id == offer_id]
        return sorted(events, key=lambda e: e.start_date)

    def create_event(self, data: Dict[str, Any]) -> Event:
        now = datetime.utcnow()
        event = Event(id=_new_id(), created_at=now, updated_at=now, **data)
        self.events[event.id] = event
        return event

    def update_event(self, event: Event, data: Dict[str, Any]) -> Event:
        for key, value in data.items():
            setattr(event, key, value)
        event.updated_at = datetime.utcnow()
        return event

    def delete_event(self, event: Event) -> None:
        event.participants = []
        self.events.pop(event.id, None)

    def cancel_event(self, event_id: str, reason: str, now: datetime) -> Optional[Event]:
        event = self.events.get(event_id)
        if event is None or event.status == EventStatus.CANCELLED:
            return None
        event.status = EventStatus.CANCELLED
        event.cancellation_reason = reason
        event.cancelled_at = now
        event.updated_at = now
        return event

    # Offers

    def get_offer(self, offer_id: str) -> Optional[Offer]:
        return self.offers.get(offer_id)

    def list_offers_for_partner(self, partner_id: str) -> List[Offer]:
        offers = [o for o in self.offers.values() if o.business_partner_id == partner_id]
        return sorted(offers, key=lambda o: o.created_at, reverse=True)

    def create_offer(self, data: Dict[str, Any], link_all: bool = False) -> Offer:
        now = datetime.utcnow()
        offer = Offer(id=_new_id(), created_at=now, updated_at=now, **data)
        if link_all:
            self.link_offer_to_all_events(offer.id, offer.business_partner_id)
        self.offers[offer.id] = offer
        return offer

    def update_offer(self, offer: Offer, data: Dict[str, Any], link_all: bool = False) -> Offer:
        for key, value in data.items():
            setattr(offer, key, value)
        offer.updated_at = datetime.utcnow()
        if link_all:
            self.link_offer_to_all_events(offer.id, offer.business_partner_id)
        return offer

    def delete_offer(self, offer: Offer) -> None:
        for event in self.events.values():
            if event.offer_id == offer.id:
                event.offer_id = None
        self.offers.pop(offer.id, None)

    def link_offer_to_all_events(self, offer_id: str, partner_id: str) -> int:
        linked = 0
        for event in self.events.values():
            if event.host_id == partner_id:
                event.offer_id = offer_id
                linked += 1
        return linked

    # Participants

    def add_participant(self, event: Event, partner: BusinessPartner) -> Event:
        event.participants.append(partner)
        return event

    def remove_participant(self, event: Event, partner: BusinessPartner) -> Event:
        event.participants.remove(partner)
        return event
