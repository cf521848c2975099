"""Offer status derivation, ownership and event linking."""

import enum
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from models import BusinessPartner, Event, Offer
from services.errors import AuthorizationError, NotFoundError, ValidationError
from stores.interfaces import PortalStore
from utils.logging_config import get_logger

logger = get_logger("services")


class OfferStatus(str, enum.Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"


OFFER_FILTERS = ["active", "expired", "all"]


def derive_status(offer: Offer, now: datetime) -> OfferStatus:
    """Recomputed on every read; an offer without expiry never expires."""
    if offer.expiry_date is None or offer.expiry_date > now:
        return OfferStatus.ACTIVE
    return OfferStatus.EXPIRED


def filter_offers(offers: Iterable[Offer], status: str, now: datetime) -> List[Offer]:
    if status not in OFFER_FILTERS:
        raise ValidationError(
            f"Invalid status '{status}'. Use one of: {', '.join(OFFER_FILTERS)}",
            field="status",
        )
    if status == "all":
        return list(offers)
    wanted = OfferStatus.ACTIVE if status == "active" else OfferStatus.EXPIRED
    return [o for o in offers if derive_status(o, now) == wanted]


def discounted_price(price: int, percentage: int) -> float:
    discounted = Decimal(price) * (Decimal(100) - Decimal(percentage)) / Decimal(100)
    return float(discounted.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def get_owned_offer(store: PortalStore, partner: BusinessPartner, offer_id: str,
                    action: str = "view") -> Offer:
    offer = store.get_offer(offer_id)
    if not offer:
        raise NotFoundError("Offer not found")
    if offer.business_partner_id != partner.id:
        raise AuthorizationError(f"Not authorized to {action} this offer")
    return offer


def create_offer(store: PortalStore, partner: BusinessPartner, data: Dict[str, Any],
                 link_all: bool = False) -> Offer:
    """Create the offer; `link_all` attaches it to every event of the partner
    in the same write, so a failed link leaves no offer behind."""
    offer = store.create_offer(dict(data, business_partner_id=partner.id), link_all=link_all)
    logger.info(f"Offer {offer.id} created for partner {partner.id} (linked to all={link_all})")
    return offer


def update_offer(store: PortalStore, partner: BusinessPartner, offer: Offer,
                 data: Dict[str, Any], link_all: bool = False) -> Offer:
    offer = store.update_offer(offer, data, link_all=link_all)
    logger.info(f"Offer {offer.id} updated (linked to all={link_all})")
    return offer


def link_to_all_events(store: PortalStore, offer: Offer, partner: BusinessPartner) -> int:
    """Point every event of the partner (drafts, past and cancelled included) at the offer."""
    linked = store.link_offer_to_all_events(offer.id, partner.id)
    logger.info(f"Offer {offer.id} linked to {linked} events of partner {partner.id}")
    return linked


def delete_offer(store: PortalStore, offer: Offer) -> None:
    offer_id = offer.id
    store.delete_offer(offer)
    logger.info(f"Offer {offer_id} deleted")


def events_for_offer(store: PortalStore, offer: Offer) -> List[Event]:
    return store.list_events_by_offer(offer.id)
