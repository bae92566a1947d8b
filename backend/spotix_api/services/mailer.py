"""Transactional email through provider templates (MailerSend, Mailjet)."""
import logging
from typing import Any, Dict, Optional

import httpx

from spotix_api.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

SUPPORT_EMAIL = "support@spotix.com.ng"
DASHBOARD_URL = "https://www.spotix.com.ng/dashboard"

# MailerSend template ids
TEMPLATE_PASSWORD_RESET = "vywj2lpx7ek47oqz"
TEMPLATE_BOOKER_WELCOME = "zr6ke4n8j3e4on12"
TEMPLATE_PAYMENT_CONFIRMATION = "3zxk54vv5op4jy6v"
TEMPLATE_EMAIL_VERIFICATION = "3vz9dle5ydplkj50"

# Mailjet template id
TEMPLATE_TEAM_MEMBER_ADDED = 6986222


class MailerSendClient:
    base_url = "https://api.mailersend.com/v1"

    def __init__(self, api_key: Optional[str], timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def send_template(self, *, sender: Dict[str, str], to_email: str, to_name: str, subject: str, template_id: str, data: Dict[str, Any]) -> None:
        if not self.api_key:
            raise ConfigurationError("Email provider is not configured")
        payload = {
            "from": sender,
            "to": [{"email": to_email, "name": to_name}],
            "subject": subject,
            "template_id": template_id,
            "personalization": [{"email": to_email, "data": data}],
        }
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post("/email", json=payload, headers={"Authorization": f"Bearer {self.api_key}"})
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Email provider unreachable: {exc}") from exc
        if not resp.is_success:
            raise UpstreamError(f"Email provider returned {resp.status_code}: {resp.text[:200]}")
        logger.info("Template %s sent to %s", template_id, to_email)

    async def send_password_reset(self, email: str, name: str, reset_url: str) -> None:
        await self.send_template(
            sender={"email": "auth@spotix.com.ng", "name": "Spotix Security"},
            to_email=email, to_name=name,
            subject="Password Change",
            template_id=TEMPLATE_PASSWORD_RESET,
            data={"name": name, "action_url": reset_url, "support_url": SUPPORT_EMAIL, "account_name": name},
        )

    async def send_booker_confirmation(self, email: str, name: str) -> None:
        await self.send_template(
            sender={"email": "auth@spotix.com.ng", "name": "Spotix Events"},
            to_email=email, to_name=name,
            subject="Welcome to Spotix Bookers",
            template_id=TEMPLATE_BOOKER_WELCOME,
            data={"name": name, "action_url": DASHBOARD_URL, "support_url": SUPPORT_EMAIL},
        )

    async def send_payment_confirmation(
        self,
        email: str,
        name: str,
        ticket_id: str,
        event_name: str,
        payment_ref: str,
        payment_method: str,
        event_host: Optional[str] = None,
        ticket_type: Optional[str] = None,
        booker_email: Optional[str] = None,
        ticket_price: Optional[str] = None,
    ) -> None:
        await self.send_template(
            sender={"email": "tickets@spotix.com.ng", "name": "Spotix Tickets"},
            to_email=email, to_name=name,
            subject=f"Your Ticket for {event_name}",
            template_id=TEMPLATE_PAYMENT_CONFIRMATION,
            data={
                "name": name,
                "ticket_ID": ticket_id,
                "event_host": event_host or "Spotix Event Host",
                "event_name": event_name,
                "payment_ref": payment_ref,
                "ticket_type": ticket_type or "Standard",
                "booker_email": booker_email or SUPPORT_EMAIL,
                "ticket_price": ticket_price or "0.00",
                "payment_method": payment_method,
            },
        )

    async def send_email_verification(self, email: str, name: str, action_url: str) -> None:
        await self.send_template(
            sender={"email": "auth@spotix.com.ng", "name": "Spotix Account Verification"},
            to_email=email, to_name=name,
            subject="Verify Your Spotix Account",
            template_id=TEMPLATE_EMAIL_VERIFICATION,
            data={"name": name, "action_url": action_url},
        )


class MailjetClient:
    base_url = "https://api.mailjet.com/v3.1"

    def __init__(self, public_key: Optional[str], private_key: Optional[str], timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.public_key = public_key
        self.private_key = private_key
        self.timeout = timeout
        self._transport = transport

    async def send_team_member_added(
        self,
        *,
        email: str,
        recipient_name: str,
        collaboration_id: str,
        event_id: str,
        booker_id: str,
        user_role: str,
        event_name: str,
        booker_name: str,
        username: str,
    ) -> None:
        if not self.public_key or not self.private_key:
            raise ConfigurationError("Notification provider is not configured")
        message = {
            "From": {"Email": "teams@spotix.com.ng", "Name": "Spotix Teams"},
            "To": [{"Email": email, "Name": recipient_name}],
            "TemplateID": TEMPLATE_TEAM_MEMBER_ADDED,
            "TemplateLanguage": True,
            "Subject": "You've been added to a Spotix event team",
            "Variables": {
                "collab_id": collaboration_id,
                "event_id": event_id,
                "booker_id": booker_id,
                "UserRole": user_role,
                "eventname": event_name,
                "bookername": booker_name,
                "username": username,
            },
        }
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post("/send", json={"Messages": [message]}, auth=(self.public_key, self.private_key))
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Notification provider unreachable: {exc}") from exc
        if not resp.is_success:
            raise UpstreamError(f"Notification provider returned {resp.status_code}: {resp.text[:200]}")
        logger.info("Team member notification sent to %s", email)
