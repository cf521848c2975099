"""SQLAlchemy-backed store used by the running application."""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from database.connection import get_db
from models import BusinessPartner, Event, EventStatus, Interest, Offer, User
from stores.interfaces import PortalStore
from utils.logging_config import get_logger

logger = get_logger("db")


class SqlStore(PortalStore):
    """PortalStore over a single SQLAlchemy session (one per request)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _transaction(self):
        """Commit once at the end, roll back everything on failure."""
        try:
            yield
            self.db.commit()
        except Exception:
            logger.warning("Rolling back failed transaction", exc_info=True)
            self.db.rollback()
            raise

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, data: Dict[str, Any]) -> User:
        user = User(**data)
        with self._transaction():
            self.db.add(user)
        self.db.refresh(user)
        return user

    # Business partners

    def get_partner(self, partner_id: str) -> Optional[BusinessPartner]:
        return self.db.query(BusinessPartner).filter(BusinessPartner.id == partner_id).first()

    def get_partner_by_user_id(self, user_id: str) -> Optional[BusinessPartner]:
        return self.db.query(BusinessPartner).filter(BusinessPartner.user_id == user_id).first()

    def _resolve_interests(self, names: List[str]) -> List[Interest]:
        interests = []
        for name in dict.fromkeys(names):
            interest = self.db.query(Interest).filter(Interest.name == name).first()
            if not interest:
                interest = Interest(name=name)
                self.db.add(interest)
            interests.append(interest)
        return interests

    def create_partner(self, data: Dict[str, Any], interests: List[str]) -> BusinessPartner:
        partner = BusinessPartner(**data)
        with self._transaction():
            partner.interests = self._resolve_interests(interests)
            self.db.add(partner)
        self.db.refresh(partner)
        return partner

    def update_partner(self, partner: BusinessPartner, data: Dict[str, Any],
                       interests: Optional[List[str]]) -> BusinessPartner:
        with self._transaction():
            for key, value in data.items():
                setattr(partner, key, value)
            if interests is not None:
                partner.interests = self._resolve_interests(interests)
        self.db.refresh(partner)
        return partner

    def list_interests(self) -> List[Interest]:
        return self.db.query(Interest).order_by(Interest.name).all()

    # Events

    def get_event(self, event_id: str) -> Optional[Event]:
        return self.db.query(Event).filter(Event.id == event_id).first()

    def list_events_for_partner(self, partner_id: str) -> List[Event]:
        return self.db.query(Event).filter(
            Event.host_id == partner_id
        ).order_by(Event.start_date).all()

    def list_events_by_offer(self, offer_id: str) -> List[Event]:
        return self.db.query(Event).filter(
            Event.offer_id == offer_id
        ).order_by(Event.start_date).all()

    def create_event(self, data: Dict[str, Any]) -> Event:
        event = Event(**data)
        with self._transaction():
            self.db.add(event)
        self.db.refresh(event)
        return event

    def update_event(self, event: Event, data: Dict[str, Any]) -> Event:
        with self._transaction():
            for key, value in data.items():
                setattr(event, key, value)
        self.db.refresh(event)
        return event

    def delete_event(self, event: Event) -> None:
        with self._transaction():
            event.participants = []
            self.db.delete(event)

    def cancel_event(self, event_id: str, reason: str, now: datetime) -> Optional[Event]:
        with self._transaction():
            updated = self.db.query(Event).filter(
                Event.id == event_id,
                Event.status != EventStatus.CANCELLED
            ).update({
                Event.status: EventStatus.CANCELLED,
                Event.cancellation_reason: reason,
                Event.cancelled_at: now,
                Event.updated_at: now,
            }, synchronize_session=False)

        if not updated:
            return None

        event = self.get_event(event_id)
        self.db.refresh(event)
        return event

    # Offers

    def get_offer(self, offer_id: str) -> Optional[Offer]:
        return self.db.query(Offer).filter(Offer.id == offer_id).first()

    def list_offers_for_partner(self, partner_id: str) -> List[Offer]:
        return self.db.query(Offer).filter(
            Offer.business_partner_id == partner_id
        ).order_by(Offer.created_at.desc()).all()

    def create_offer(self, data: Dict[str, Any], link_all: bool = False) -> Offer:
        offer = Offer(**data)
        with self._transaction():
            self.db.add(offer)
            if link_all:
                # id is generated on flush
                self.db.flush()
                self._link_all(offer.id, offer.business_partner_id)
        self.db.refresh(offer)
        return offer

    def update_offer(self, offer: Offer, data: Dict[str, Any], link_all: bool = False) -> Offer:
        with self._transaction():
            for key, value in data.items():
                setattr(offer, key, value)
            if link_all:
                self._link_all(offer.id, offer.business_partner_id)
        self.db.refresh(offer)
        return offer

    def _link_all(self, offer_id: str, partner_id: str) -> int:
        return self.db.query(Event).filter(
            Event.host_id == partner_id
        ).update({Event.offer_id: offer_id}, synchronize_session=False)

    def delete_offer(self, offer: Offer) -> None:
        with self._transaction():
            self.db.query(Event).filter(
                Event.offer_id == offer.id
            ).update({Event.offer_id: None}, synchronize_session=False)
            self.db.delete(offer)
        # Events loaded earlier in this session still hold the old offer_id
        self.db.expire_all()

    def link_offer_to_all_events(self, offer_id: str, partner_id: str) -> int:
        with self._transaction():
            linked = self._link_all(offer_id, partner_id)
        self.db.expire_all()
        return linked

    # Participants

    def add_participant(self, event: Event, partner: BusinessPartner) -> Event:
        with self._transaction():
            event.participants.append(partner)
        self.db.refresh(event)
        return event

    def remove_participant(self, event: Event, partner: BusinessPartner) -> Event:
        with self._transaction():
            event.participants.remove(partner)
        self.db.refresh(event)
        return event


def get_store(db: Session = Depends(get_db)) -> PortalStore:
    """FastAPI dependency returning the request-scoped store."""
    return SqlStore(db)
