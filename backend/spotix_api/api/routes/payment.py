from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from spotix_api.api.deps import get_paystack
from spotix_api.api.health import health_payload
from spotix_api.core.config import Settings, get_settings
from spotix_api.core.errors import BadRequest
from spotix_api.services.paystack import PaystackClient

router = APIRouter()

class InitializePaymentBody(BaseModel):
    amount: Optional[float] = None
    email: Optional[str] = None
    metadata: Any = None

@router.post("")
async def initialize_payment(
    payload: InitializePaymentBody,
    paystack: PaystackClient = Depends(get_paystack),
    settings: Settings = Depends(get_settings),
):
    """Start a gateway checkout; ``amount`` is in naira and relayed in kobo."""
    if not payload.amount or not payload.email:
        raise BadRequest("Amount and email are required")
    if payload.amount < 0:
        raise BadRequest("Amount must be positive")
    callback_url = f"{settings.app_url.rstrip('/')}/paystack-success"
    return await paystack.initialize_transaction(payload.email, payload.amount, payload.metadata, callback_url)

@router.get("/verify")
async def verify_charge(reference: Optional[str] = Query(None), paystack: PaystackClient = Depends(get_paystack)):
    if not reference:
        raise BadRequest("Reference is required")
    return await paystack.verify_transaction(reference)

@router.get("/health")
def payment_health():
    return health_payload("Payment API")
