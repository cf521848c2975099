"""Event service - ownership checks, CRUD and participant registration.

Every check runs before the first store mutation, so a rejected request
never leaves a partial write behind.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from models import BusinessPartner, Event, EventStatus, User
from services import lifecycle
from services.errors import AuthorizationError, NotFoundError, PolicyViolation, ValidationError
from services.lifecycle import EventBucket
from services.offers import get_owned_offer
from stores.interfaces import PortalStore
from utils.logging_config import get_logger

logger = get_logger("services")


def require_partner(store: PortalStore, user: User) -> BusinessPartner:
    partner = store.get_partner_by_user_id(user.id)
    if not partner:
        raise ValidationError("Business partner profile not found")
    return partner


def get_owned_event(store: PortalStore, partner: BusinessPartner, event_id: str,
                    action: str = "view") -> Event:
    event = store.get_event(event_id)
    if not event:
        raise NotFoundError("Event not found")
    if event.host_id != partner.id:
        raise AuthorizationError(f"Not authorized to {action} this event")
    return event


def get_visible_event(store: PortalStore, partner: BusinessPartner, event_id: str) -> Event:
    """Hosts see all their events; everyone else only sees published ones."""
    event = store.get_event(event_id)
    if not event or (event.draft_mode and event.host_id != partner.id):
        raise NotFoundError("Event not found")
    return event


def _check_dates(start_date: datetime, end_date: datetime) -> None:
    if end_date < start_date:
        raise ValidationError("End date must be after start date", field="endDate")


def _check_offer(store: PortalStore, partner: BusinessPartner, offer_id: Optional[str]) -> None:
    if offer_id is not None:
        get_owned_offer(store, partner, offer_id, action="use")


def list_events(store: PortalStore, partner: BusinessPartner, status: str,
                now: datetime) -> List[Event]:
    events = store.list_events_for_partner(partner.id)
    return lifecycle.filter_events(events, status, now)


def create_event(store: PortalStore, partner: BusinessPartner, data: Dict[str, Any]) -> Event:
    _check_dates(data["start_date"], data["end_date"])
    _check_offer(store, partner, data.get("offer_id"))

    event = store.create_event(dict(
        data,
        host_id=partner.id,
        status=EventStatus.ACTIVE,
    ))
    logger.info(f"Event {event.id} created for partner {partner.id} (draft={event.draft_mode})")
    return event


def update_event(store: PortalStore, partner: BusinessPartner, event: Event,
                 changes: Dict[str, Any]) -> Event:
    """Apply a partial update; fields missing from `changes` keep their value."""
    start_date = changes.get("start_date", event.start_date)
    end_date = changes.get("end_date", event.end_date)
    _check_dates(start_date, end_date)
    if "offer_id" in changes:
        _check_offer(store, partner, changes["offer_id"])

    max_participants = changes.get("max_participants")
    if max_participants is not None and max_participants < event.current_participants:
        raise ValidationError(
            f"Capacity cannot be lower than the {event.current_participants} registered participants",
            field="maxParticipants",
        )

    event = store.update_event(event, changes)
    logger.info(f"Event {event.id} updated")
    return event


def delete_event(store: PortalStore, event: Event) -> None:
    event_id = event.id
    store.delete_event(event)
    logger.info(f"Event {event_id} deleted")


def list_participants(event: Event) -> List[BusinessPartner]:
    return list(event.participants)


def register_participant(store: PortalStore, partner: BusinessPartner, event: Event,
                         now: datetime) -> Event:
    bucket = lifecycle.classify(event, now)
    if event.host_id == partner.id:
        raise PolicyViolation("Hosts cannot register for their own events")
    if bucket != EventBucket.UPCOMING:
        raise PolicyViolation(f"Cannot register for a {bucket.value} event")
    if partner in event.participants:
        raise PolicyViolation("Already registered for this event")
    if event.current_participants >= event.max_participants:
        raise PolicyViolation("Event is full", capacity=event.max_participants)

    event = store.add_participant(event, partner)
    logger.info(f"Partner {partner.id} registered for event {event.id}")
    return event


def unregister_participant(store: PortalStore, partner: BusinessPartner, event: Event) -> Event:
    if partner not in event.participants:
        raise NotFoundError("Registration not found")

    event = store.remove_participant(event, partner)
    logger.info(f"Partner {partner.id} unregistered from event {event.id}")
    return event
