from fastapi import APIRouter, Depends, Response
from typing import List

from models import BusinessPartner
from routes.auth import get_current_partner
from routes.events import _response as event_response
from schemas.event import EventResponse
from schemas.offer import OfferCreate, OfferResponse
from services import lifecycle, offers
from stores.interfaces import PortalStore
from stores.sql_store import get_store

router = APIRouter(prefix="/api/offers")


def _response(offer) -> OfferResponse:
    return OfferResponse.from_offer(offer, offers.derive_status(offer, lifecycle.utcnow()).value)


@router.get("", response_model=List[OfferResponse])
def list_offers(
    status: str = "active",
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """
    List the caller's offers
    status: active (default), expired or all; derived from the expiry date on every call
    """
    now = lifecycle.utcnow()
    found = offers.filter_offers(store.list_offers_for_partner(partner.id), status, now)
    return [OfferResponse.from_offer(o, offers.derive_status(o, now).value) for o in found]


@router.get("/{offer_id}", response_model=OfferResponse)
def get_offer(
    offer_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    return _response(offers.get_owned_offer(store, partner, offer_id))


@router.post("", response_model=OfferResponse, status_code=201)
def create_offer(
    data: OfferCreate,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """Create an offer, optionally attaching it to every event of the caller"""
    offer = offers.create_offer(store, partner, data.fields(), data.link_to_all_events)
    return _response(offer)


@router.put("/{offer_id}", response_model=OfferResponse)
def update_offer(
    offer_id: str,
    data: OfferCreate,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    offer = offers.get_owned_offer(store, partner, offer_id, action="update")
    offer = offers.update_offer(store, partner, offer, data.fields(), data.link_to_all_events)
    return _response(offer)


@router.delete("/{offer_id}", status_code=204)
def delete_offer(
    offer_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """Delete an offer; events using it are detached first"""
    offer = offers.get_owned_offer(store, partner, offer_id, action="delete")
    offers.delete_offer(store, offer)
    return Response(status_code=204)


@router.get("/{offer_id}/events", response_model=List[EventResponse])
def list_offer_events(
    offer_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    offer = offers.get_owned_offer(store, partner, offer_id, action="view events of")
    return [event_response(e) for e in offers.events_for_offer(store, offer)]
