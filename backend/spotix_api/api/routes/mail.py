import logging

from fastapi import APIRouter, Depends

from spotix_api.api.deps import get_mailer
from spotix_api.api.health import health_payload
from spotix_api.core.errors import ApiError
from spotix_api.schemas.mail import (
    BookerConfirmationBody,
    EmailVerificationBody,
    PasswordResetBody,
    PaymentConfirmationBody,
    require,
)
from spotix_api.services.mailer import MailerSendClient

logger = logging.getLogger(__name__)

router = APIRouter()

def _failed(what: str, exc: ApiError) -> ApiError:
    logger.error("Error sending %s email: %s", what, exc.message)
    return ApiError(f"Failed to send {what} email", status_code=exc.status_code, details=exc.message, success=False)

@router.post("/password-reset")
async def password_reset(payload: PasswordResetBody, mailer: MailerSendClient = Depends(get_mailer)):
    require(payload, "email", "name", "resetUrl", message="Missing required fields: email, name, or resetUrl")
    try:
        await mailer.send_password_reset(payload.email, payload.name, payload.resetUrl)
    except ApiError as exc:
        raise _failed("password reset", exc) from exc
    return {"success": True, "message": "Password reset email sent successfully"}

@router.post("/booker-confirmation")
async def booker_confirmation(payload: BookerConfirmationBody, mailer: MailerSendClient = Depends(get_mailer)):
    require(payload, "email", "name", message="Missing required fields: email or name")
    try:
        await mailer.send_booker_confirmation(payload.email, payload.name)
    except ApiError as exc:
        raise _failed("booker confirmation", exc) from exc
    return {"success": True, "message": "Booker confirmation email sent successfully"}

@router.post("/payment-confirmation")
async def payment_confirmation(payload: PaymentConfirmationBody, mailer: MailerSendClient = Depends(get_mailer)):
    require(
        payload, "email", "name", "ticket_ID", "event_name", "payment_ref", "payment_method",
        message="Missing required fields for payment confirmation email",
    )
    try:
        await mailer.send_payment_confirmation(
            email=payload.email,
            name=payload.name,
            ticket_id=payload.ticket_ID,
            event_name=payload.event_name,
            payment_ref=payload.payment_ref,
            payment_method=payload.payment_method,
            event_host=payload.event_host,
            ticket_type=payload.ticket_type,
            booker_email=payload.booker_email,
            ticket_price=payload.ticket_price,
        )
    except ApiError as exc:
        raise _failed("payment confirmation", exc) from exc
    return {"success": True, "message": "Payment confirmation email sent successfully"}

@router.post("/email-verification")
async def email_verification(payload: EmailVerificationBody, mailer: MailerSendClient = Depends(get_mailer)):
    require(payload, "email", "name", "action_url", message="Missing required fields: email, name, or action_url")
    try:
        await mailer.send_email_verification(payload.email, payload.name, payload.action_url)
    except ApiError as exc:
        raise _failed("verification", exc) from exc
    return {"success": True, "message": "Verification email sent successfully"}

@router.get("/health")
def mail_health():
    return health_payload("Transactional Mail API")
