from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from spotix_api.api.deps import get_webhook_processor
from spotix_api.api.health import health_payload
from spotix_api.core.security import SIGNATURE_HEADER
from spotix_api.services.webhooks import WebhookProcessor

router = APIRouter()

@router.post("")
async def paystack_webhook(request: Request, processor: WebhookProcessor = Depends(get_webhook_processor)):
    # The signature covers the exact bytes sent, so read the raw body
    raw = await request.body()
    return await run_in_threadpool(processor.handle, raw, request.headers.get(SIGNATURE_HEADER))

@router.get("/health")
def webhook_health():
    return health_payload("Paystack Webhook Handler", status="active")
