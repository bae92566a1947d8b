from fastapi import APIRouter

from spotix_api.api.routes import health, verify_payment, webhook, bank, tickets, payment, enhance, mail, notify

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(verify_payment.router, prefix="/verify-payment", tags=["payments"])  # GET ?ref=
api_router.include_router(webhook.router, prefix="/webhook", tags=["payments"])  # POST gateway callback
api_router.include_router(bank.router, prefix="/verify", tags=["payouts"])  # GET ?accountNumber&bankName
api_router.include_router(tickets.router, prefix="/ticket", tags=["tickets"])  # POST /iwss, /free
api_router.include_router(payment.router, prefix="/payment", tags=["payments"])  # POST /, GET /verify
api_router.include_router(enhance.router, prefix="/enhance", tags=["ai"])  # POST /
api_router.include_router(mail.router, prefix="/api/mail", tags=["mail"])  # template emails
api_router.include_router(notify.router, prefix="/api/notify", tags=["mail"])  # team notifications
