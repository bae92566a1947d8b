from typing import Optional

from pydantic import BaseModel

from spotix_api.core.errors import BadRequest

# Every field is optional at the schema level; handlers report the missing
# ones with the API's own 400 message.

class PasswordResetBody(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    resetUrl: Optional[str] = None

class BookerConfirmationBody(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None

class PaymentConfirmationBody(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    ticket_ID: Optional[str] = None
    event_host: Optional[str] = None
    event_name: Optional[str] = None
    payment_ref: Optional[str] = None
    ticket_type: Optional[str] = None
    booker_email: Optional[str] = None
    ticket_price: Optional[str] = None
    payment_method: Optional[str] = None

class EmailVerificationBody(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    action_url: Optional[str] = None

class TeamMemberAddedBody(BaseModel):
    collaborationId: Optional[str] = None
    eventId: Optional[str] = None
    bookerId: Optional[str] = None
    userRole: Optional[str] = None
    eventName: Optional[str] = None
    bookerName: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    recipientName: Optional[str] = None


def require(body: BaseModel, *fields: str, message: Optional[str] = None) -> None:
    missing = [f for f in fields if not getattr(body, f)]
    if missing:
        raise BadRequest(message or f"Missing required fields: {', '.join(missing)}", success=False)
