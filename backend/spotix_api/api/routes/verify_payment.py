from fastapi import APIRouter, Depends, Request

from spotix_api.api.deps import get_reference_store
from spotix_api.api.health import health_payload
from spotix_api.core.errors import BadRequest, NotFound
from spotix_api.models.reference import PAID_PREFIX, STATUS_PENDING
from spotix_api.services.reference_store import ReferenceStore

router = APIRouter()

ALLOWED_PARAMS = ["ref"]

@router.get("")
def verify_payment(request: Request, store: ReferenceStore = Depends(get_reference_store)):
    """Status and snapshot of a paid reference, as polled by the checkout page."""
    foreign = [k for k in request.query_params.keys() if k not in ALLOWED_PARAMS]
    if foreign:
        raise BadRequest(f"Invalid parameter(s): {', '.join(foreign)}", allowedParameters=ALLOWED_PARAMS)
    ref = (request.query_params.get("ref") or "").strip()
    if not ref:
        raise BadRequest("Missing required parameter: ref")
    if not ref.startswith(PAID_PREFIX):
        raise BadRequest(f"Invalid reference format. Expected format: {PAID_PREFIX}{{timestamp}}")

    r = store.get(ref)
    if r is None:
        raise NotFound("Payment reference not found", reference=ref)
    return {
        "success": True,
        "reference": ref,
        "eventId": r.event_id,
        "eventCreatorId": r.event_creator_id,
        "eventName": r.event_name,
        "ticketPrice": r.ticket_price or 0,
        "ticketType": r.ticket_type,
        "totalAmount": r.total_amount or 0,
        "transactionFee": r.transaction_fee or 0,
        "status": r.status or STATUS_PENDING,
        "userId": r.user_id,
        "discountCode": r.discount_code,
        "discountData": r.discount_data,
        "referralCode": r.referral_code,
        "referralName": r.referral_name,
        "eventVenue": r.event_venue,
        "eventType": r.event_type,
        "eventDate": r.event_date,
        "eventEndDate": r.event_end_date,
        "eventStart": r.event_start,
        "eventEnd": r.event_end,
        "bookerName": r.booker_name,
        "bookerEmail": r.booker_email,
        "ticketId": r.ticket_id,
    }

@router.get("/health")
def verify_payment_health():
    return health_payload("Payment Verification API")
