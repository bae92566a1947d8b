import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from spotix_api.core.errors import ApiError, BadRequest, ConfigurationError, NotFound, Unauthorized
from spotix_api.core.security import verify_signature
from spotix_api.models.reference import STATUS_FAILED, STATUS_SUCCESSFUL
from spotix_api.services.reference_store import ReferenceStore

logger = logging.getLogger(__name__)

# Gateway event -> reference status
HANDLED_EVENTS = {
    "charge.success": STATUS_SUCCESSFUL,
    "charge.failed": STATUS_FAILED,
}
TICKET_PURCHASE = "ticket_purchase"


def transaction_type(data: Dict[str, Any]) -> Optional[str]:
    """Value of the ``type`` custom field the checkout attaches to the charge metadata."""
    metadata = data.get("metadata")
    if not isinstance(metadata, dict):
        return None
    for field in metadata.get("custom_fields") or []:
        if isinstance(field, dict) and field.get("variable_name") == "type":
            return field.get("value")
    return None


class WebhookProcessor:
    def __init__(self, store: ReferenceStore, secret: Optional[str], require_ticket_purchase: bool = True):
        self.store = store
        self.secret = secret
        self.require_ticket_purchase = require_ticket_purchase

    def handle(self, raw_body: bytes, signature: Optional[str]) -> Dict[str, Any]:
        if not self.secret:
            logger.error("PAYSTACK_SECRET_KEY not configured")
            raise ConfigurationError("Webhook secret is not configured")
        if not verify_signature(self.secret, raw_body, signature):
            logger.warning("Invalid Paystack signature")
            raise Unauthorized("Invalid signature", error="Invalid signature")

        try:
            payload = json.loads(raw_body or b"{}")
        except ValueError:
            raise BadRequest("Webhook body is not valid JSON")
        if not isinstance(payload, dict):
            raise BadRequest("Webhook body must be a JSON object")

        event = payload.get("event")
        data = payload.get("data") if isinstance(payload.get("data"), dict) else {}
        logger.info("Received Paystack event: %s", event)

        status = HANDLED_EVENTS.get(event)
        if status is None:
            logger.info("Unhandled event type: %s", event)
            return {"success": True, "message": "Event received but not processed", "event": event}

        reference = data.get("reference")
        if not reference:
            logger.error("No reference found in webhook data")
            raise BadRequest("Missing reference", error="Missing reference")

        tx_type = transaction_type(data)
        logger.info("Transaction type: %s", tx_type or "not specified")
        if self.require_ticket_purchase and tx_type != TICKET_PURCHASE:
            logger.info("Skipping non-ticket transaction: %s", tx_type)
            return {
                "success": True,
                "message": "Transaction received but not a ticket purchase",
                "transactionType": tx_type,
                "reference": reference,
            }

        if self.store.get(reference) is None:
            logger.warning("Reference %s not found", reference)
            raise NotFound("Reference not found", error="Reference not found", reference=reference)

        customer = data.get("customer") if isinstance(data.get("customer"), dict) else {}
        try:
            self.store.update(
                reference,
                status=status,
                payment_event=event,
                transaction_type=tx_type or TICKET_PURCHASE,
                amount=data.get("amount"),
                currency=data.get("currency"),
                customer_email=customer.get("email"),
                customer_code=customer.get("customer_code"),
            )
        except SQLAlchemyError as exc:
            logger.exception("Reference update failed for %s", reference)
            raise ApiError("Database update failed", error="Database update failed", details=str(exc)) from exc

        logger.info("Updated ticket purchase reference %s to %s", reference, status)
        return {
            "success": True,
            "message": "Ticket purchase payment status updated",
            "reference": reference,
            "status": status,
            "transactionType": tx_type or TICKET_PURCHASE,
        }
