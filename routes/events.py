from fastapi import APIRouter, Depends, Response
from typing import List

from models import BusinessPartner
from routes.auth import get_current_partner
from schemas.event import CancelRequest, CancelResponse, EventCreate, EventResponse, EventUpdate
from schemas.profile import ParticipantResponse
from services import events, lifecycle
from stores.interfaces import PortalStore
from stores.sql_store import get_store

router = APIRouter(prefix="/api/events")


def _response(event) -> EventResponse:
    return EventResponse.from_event(event, lifecycle.classify(event, lifecycle.utcnow()).value)


@router.get("", response_model=List[EventResponse])
def list_events(
    status: str = "upcoming",
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """
    List the caller's events in one bucket
    status: upcoming (default), past, draft, cancelled or all
    """
    now = lifecycle.utcnow()
    return [
        EventResponse.from_event(e, lifecycle.classify(e, now).value)
        for e in events.list_events(store, partner, status, now)
    ]


@router.get("/{event_id}", response_model=EventResponse)
def get_event(
    event_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    return _response(events.get_owned_event(store, partner, event_id))


@router.post("", response_model=EventResponse, status_code=201)
def create_event(
    data: EventCreate,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    return _response(events.create_event(store, partner, data.model_dump()))


@router.put("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: str,
    data: EventUpdate,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    event = events.get_owned_event(store, partner, event_id, action="update")
    return _response(events.update_event(store, partner, event, data.changes()))


@router.delete("/{event_id}", status_code=204)
def delete_event(
    event_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    event = events.get_owned_event(store, partner, event_id, action="delete")
    events.delete_event(store, event)
    return Response(status_code=204)


@router.post("/{event_id}/cancel", response_model=CancelResponse)
def cancel_event(
    event_id: str,
    data: CancelRequest,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """
    Cancel an event with a reason
    Only allowed when the event starts at least 24 hours from now
    """
    event = events.get_owned_event(store, partner, event_id, action="cancel")
    cancelled = lifecycle.cancel(store, event, data.reason, lifecycle.utcnow())
    return CancelResponse(message="Event cancelled successfully", event=_response(cancelled))


@router.get("/{event_id}/participants", response_model=List[ParticipantResponse])
def list_participants(
    event_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    event = events.get_owned_event(store, partner, event_id, action="view participants for")
    return events.list_participants(event)


@router.post("/{event_id}/participants", response_model=EventResponse, status_code=201)
def register(
    event_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """Register the calling partner for someone else's event"""
    event = events.get_visible_event(store, partner, event_id)
    return _response(events.register_participant(store, partner, event, lifecycle.utcnow()))


@router.delete("/{event_id}/participants", response_model=EventResponse)
def unregister(
    event_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    event = events.get_visible_event(store, partner, event_id)
    return _response(events.unregister_participant(store, partner, event))
