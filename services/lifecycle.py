"""Event lifecycle - bucket classification and the cancellation policy.

Buckets are derived from the stored fields on every read:

- cancelled: `status == cancelled`, whatever the dates or draft flag say
- draft: not cancelled and `draft_mode` set
- upcoming: published and not yet ended (an event in progress stays
  upcoming until `end_date` passes)
- past: published and `end_date` before now
"""

import enum
from datetime import datetime, timedelta
from typing import Iterable, List

from models import Event, EventStatus
from services.errors import PolicyViolation, ValidationError
from stores.interfaces import PortalStore
from utils.logging_config import get_logger

logger = get_logger("services")

CANCELLATION_NOTICE = timedelta(hours=24)


class EventBucket(str, enum.Enum):
    UPCOMING = "upcoming"
    PAST = "past"
    DRAFT = "draft"
    CANCELLED = "cancelled"


STATUS_FILTERS = [bucket.value for bucket in EventBucket] + ["all"]


def utcnow() -> datetime:
    """Naive UTC timestamp, the representation used for every stored date."""
    return datetime.utcnow()


def classify(event: Event, now: datetime) -> EventBucket:
    if event.status == EventStatus.CANCELLED:
        return EventBucket.CANCELLED
    if event.draft_mode:
        return EventBucket.DRAFT
    if event.start_date > now:
        return EventBucket.UPCOMING
    if event.end_date < now:
        return EventBucket.PAST
    return EventBucket.UPCOMING


def filter_events(events: Iterable[Event], status: str, now: datetime) -> List[Event]:
    """Keep the events in the requested bucket; "all" keeps everything."""
    if status not in STATUS_FILTERS:
        raise ValidationError(
            f"Invalid status '{status}'. Use one of: {', '.join(STATUS_FILTERS)}",
            field="status",
        )
    if status == "all":
        return list(events)
    return [e for e in events if classify(e, now) == status]


def hours_until_start(event: Event, now: datetime) -> float:
    return (event.start_date - now).total_seconds() / 3600


def ensure_cancellable(event: Event, reason: str, now: datetime) -> None:
    """
    Check the cancellation policy without touching the event

    Raises:
        ValidationError: reason is missing or blank
        PolicyViolation: event already cancelled, or starts in less than
            24 hours (carries `hoursUntilStart`)
    """
    if not reason or not reason.strip():
        raise ValidationError("Cancellation reason is required", field="reason")

    if event.status == EventStatus.CANCELLED:
        raise PolicyViolation("Event is already cancelled")

    if event.start_date - now < CANCELLATION_NOTICE:
        raise PolicyViolation(
            "Events can only be cancelled if they start more than 24 hours from now",
            hoursUntilStart=round(hours_until_start(event, now)),
        )


def cancel(store: PortalStore, event: Event, reason: str, now: datetime) -> Event:
    """Cancel the event. Terminal: there is no way back to active."""
    ensure_cancellable(event, reason, now)

    cancelled = store.cancel_event(event.id, reason.strip(), now)
    if cancelled is None:
        # Another request cancelled it between the check and the update
        raise PolicyViolation("Event is already cancelled")

    logger.info(f"Event {event.id} cancelled: {reason.strip()}")
    return cancelled
