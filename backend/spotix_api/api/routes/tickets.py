from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from spotix_api.api.deps import get_issuance
from spotix_api.api.health import health_payload
from spotix_api.services.issuance import TicketIssuance

router = APIRouter()

class IssueTicketBody(BaseModel):
    # Optional so a missing reference gets the API's own 400 message
    reference: Optional[str] = None

@router.post("/iwss")
async def issue_iwss_ticket(payload: IssueTicketBody, request: Request, issuance: TicketIssuance = Depends(get_issuance)):
    """Issue the ticket for a paid reference (``SPTX-REF-*``).

    Waits briefly while the webhook has not yet confirmed the charge. Safe to
    resend: a replay returns the same ticket id and writes nothing new.
    """
    result = await issuance.issue_paid(payload.reference, cancelled=request.is_disconnected)
    return result.body

@router.get("/iwss/health")
def iwss_health():
    return health_payload("IWSS Ticket Generation API")

@router.post("/free")
async def issue_free_ticket(payload: IssueTicketBody, issuance: TicketIssuance = Depends(get_issuance)):
    """Issue a zero-priced ticket for a settled free reference (``SPTX-FREE-*``)."""
    result = await issuance.issue_free(payload.reference)
    return result.body

@router.get("/free/health")
def free_health():
    return health_payload("Free Ticket Generation API")
