"""Sharing service - invitation and share emails for a single event."""

from typing import Dict, List, Optional

from models import BusinessPartner, Event, EventStatus
from services.errors import PolicyViolation
from utils.logging_config import get_logger
from utils.mailer import (
    EmailSender,
    SendResult,
    build_event_invitation,
    event_url,
    format_event_dates,
    format_price,
)

logger = get_logger("services")


def _render(event: Event, sender_name: str, to: str, message: Optional[str], is_share: bool):
    currency = getattr(event.currency, "value", event.currency)
    return build_event_invitation(
        to=to,
        event_name=event.name,
        host_name=sender_name,
        event_date=format_event_dates(event.start_date, event.end_date),
        location=event.location,
        price=format_price(event.price, currency),
        event_link=event_url(event.id),
        personal_message=message or "",
        is_share=is_share,
    )


def invite(sender: EmailSender, host: BusinessPartner, event: Event,
           recipients: List[str], message: Optional[str] = None) -> List[Dict]:
    """
    Send one invitation per recipient
    A failed recipient is reported in the results and does not stop the others
    """
    if event.status == EventStatus.CANCELLED:
        raise PolicyViolation("Cannot invite people to a cancelled event")

    results = []
    for email in recipients:
        result = sender.send(_render(event, host.full_name, email, message, is_share=False))
        results.append({"email": email, "success": result.success, "message": result.message})

    sent = sum(1 for r in results if r["success"])
    logger.info(f"Event {event.id} invitations sent: {sent}/{len(results)}")
    return results


def share(sender: EmailSender, partner: BusinessPartner, event: Event, email: str,
          message: Optional[str] = None) -> SendResult:
    if event.status == EventStatus.CANCELLED and event.host_id != partner.id:
        raise PolicyViolation("Cannot share a cancelled event")

    result = sender.send(_render(event, partner.full_name, email, message, is_share=True))
    logger.info(f"Event {event.id} shared by partner {partner.id} (success={result.success})")
    return result
