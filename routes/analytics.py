from fastapi import APIRouter, Depends, Query

from models import BusinessPartner
from routes.auth import get_current_partner
from services import analytics, events, lifecycle
from stores.interfaces import PortalStore
from stores.sql_store import get_store

router = APIRouter(prefix="/api")


@router.get("/analytics")
def get_analytics(
    period: str = "1month",
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """
    Dashboard analytics for the caller
    period: 1month (default), 3months, 6months or year
    """
    return analytics.summarize(
        store.list_events_for_partner(partner.id),
        store.list_offers_for_partner(partner.id),
        lifecycle.utcnow(),
        period,
    )


@router.get("/events/{event_id}/analytics")
def get_event_analytics(
    event_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    event = events.get_owned_event(store, partner, event_id, action="view analytics for")
    offer = store.get_offer(event.offer_id) if event.offer_id else None
    return analytics.event_analytics(event, offer, lifecycle.utcnow())


@router.get("/stats")
def get_stats(
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    return analytics.dashboard_stats(
        store.list_events_for_partner(partner.id),
        store.list_offers_for_partner(partner.id),
        lifecycle.utcnow(),
    )


@router.get("/activities")
def get_activities(
    limit: int = Query(5, ge=1, le=50),
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    return analytics.recent_activities(
        store.list_events_for_partner(partner.id),
        store.list_offers_for_partner(partner.id),
        lifecycle.utcnow(),
        limit=limit,
    )
