from fastapi import APIRouter, Depends

from models import BusinessPartner
from routes.auth import get_current_partner
from schemas.sharing import InviteRequest, InviteResponse, ShareLinkResponse, ShareRequest, ShareResponse
from services import events, sharing
from stores.interfaces import PortalStore
from stores.sql_store import get_store
from utils.mailer import EmailSender, event_url, get_email_sender
from utils.qr import make_qr_data_uri

router = APIRouter(prefix="/api/events")


@router.post("/{event_id}/invite", response_model=InviteResponse)
def invite(
    event_id: str,
    data: InviteRequest,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store),
    sender: EmailSender = Depends(get_email_sender)
):
    """
    Email an invitation to each recipient
    Answers 200 even when some (or all) deliveries fail; see `results`
    """
    event = events.get_owned_event(store, partner, event_id, action="invite people to")
    results = sharing.invite(sender, partner, event, data.recipients, data.message)
    success_count = sum(1 for r in results if r["success"])

    return InviteResponse(
        message=f"Invitations sent to {success_count} of {len(results)} recipients",
        results=results,
        success_count=success_count,
        total_count=len(results),
    )


@router.post("/{event_id}/share", response_model=ShareResponse)
def share(
    event_id: str,
    data: ShareRequest,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store),
    sender: EmailSender = Depends(get_email_sender)
):
    event = events.get_visible_event(store, partner, event_id)
    result = sharing.share(sender, partner, event, data.email, data.message)
    return ShareResponse(success=result.success, message=result.message)


@router.get("/{event_id}/share-link", response_model=ShareLinkResponse)
def share_link(
    event_id: str,
    partner: BusinessPartner = Depends(get_current_partner),
    store: PortalStore = Depends(get_store)
):
    """Public event URL with a QR code for printing"""
    event = events.get_owned_event(store, partner, event_id, action="share")
    url = event_url(event.id)
    return ShareLinkResponse(url=url, qr_code=make_qr_data_uri(url))
