"""Store interface (repository pattern).

Stores must be swappable: services only talk to `PortalStore`, never to a
session or a dict directly. Every mutating method either fully applies or
leaves the store unchanged.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from models import BusinessPartner, Event, Interest, Offer, User


class PortalStore(ABC):
    """Interface for portal persistence operations."""

    # Users

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(self, data: Dict[str, Any]) -> User:
        """Persist a user; `data` already holds the password hash."""
        ...

    # Business partners

    @abstractmethod
    def get_partner(self, partner_id: str) -> Optional[BusinessPartner]:
        ...

    @abstractmethod
    def get_partner_by_user_id(self, user_id: str) -> Optional[BusinessPartner]:
        ...

    @abstractmethod
    def create_partner(self, data: Dict[str, Any], interests: List[str]) -> BusinessPartner:
        ...

    @abstractmethod
    def update_partner(self, partner: BusinessPartner, data: Dict[str, Any],
                       interests: Optional[List[str]]) -> BusinessPartner:
        """Apply `data`; replace interests only when `interests` is not None."""
        ...

    @abstractmethod
    def list_interests(self) -> List[Interest]:
        """Return all interests ordered by name."""
        ...

    # Events

    @abstractmethod
    def get_event(self, event_id: str) -> Optional[Event]:
        ...

    @abstractmethod
    def list_events_for_partner(self, partner_id: str) -> List[Event]:
        """Return every event hosted by the partner, ordered by start_date."""
        ...

    @abstractmethod
    def list_events_by_offer(self, offer_id: str) -> List[Event]:
        ...

    @abstractmethod
    def create_event(self, data: Dict[str, Any]) -> Event:
        ...

    @abstractmethod
    def update_event(self, event: Event, data: Dict[str, Any]) -> Event:
        ...

    @abstractmethod
    def delete_event(self, event: Event) -> None:
        """Delete the event and its participant links."""
        ...

    @abstractmethod
    def cancel_event(self, event_id: str, reason: str, now: datetime) -> Optional[Event]:
        """Mark the event cancelled unless it already is.

        Must be a single conditional update. Returns the updated event, or
        None when no active event with that id was found.
        """
        ...

    # Offers

    @abstractmethod
    def get_offer(self, offer_id: str) -> Optional[Offer]:
        ...

    @abstractmethod
    def list_offers_for_partner(self, partner_id: str) -> List[Offer]:
        """Return every offer of the partner, newest first."""
        ...

    @abstractmethod
    def create_offer(self, data: Dict[str, Any], link_all: bool = False) -> Offer:
        """Persist an offer. With `link_all`, every event of its partner is
        pointed at it in the same transaction."""
        ...

    @abstractmethod
    def update_offer(self, offer: Offer, data: Dict[str, Any], link_all: bool = False) -> Offer:
        ...

    @abstractmethod
    def delete_offer(self, offer: Offer) -> None:
        """Null `offer_id` on referencing events, then delete the offer."""
        ...

    @abstractmethod
    def link_offer_to_all_events(self, offer_id: str, partner_id: str) -> int:
        """Point every event of the partner at the offer; returns the count."""
        ...

    # Participants

    @abstractmethod
    def add_participant(self, event: Event, partner: BusinessPartner) -> Event:
        ...

    @abstractmethod
    def remove_participant(self, event: Event, partner: BusinessPartner) -> Event:
        ...
