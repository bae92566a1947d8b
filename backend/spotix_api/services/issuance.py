"""Ticket issuance for paid (IWSS) and free references.

The session is synchronous, so every database step runs in the threadpool and
only the HTTP side calls and the poll sleeps stay on the event loop.

Every step is safe to repeat: the ticket id is fixed per reference by
``ReferenceStore.assign_ticket_id``, each ticket copy is only written when
missing, and the auxiliary receivers deduplicate on the ticket id. A client
that gets an error (or no answer) resends the same reference.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from spotix_api.core.config import Settings
from spotix_api.core.errors import (
    ApiError,
    BadRequest,
    ClientDisconnected,
    NotFound,
    PaymentPending,
    PaymentRejected,
)
from spotix_api.models.reference import (
    FREE_PREFIX,
    FREE_TICKET_VENDOR,
    PAID_PREFIX,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_SETTLED,
    STATUS_SUCCESSFUL,
    PaymentReference,
)
from spotix_api.models.referral import Referral
from spotix_api.models.ticket import AdminEventTicket, EventAttendee, TicketHistory
from spotix_api.models.user import User
from spotix_api.services.best_effort import SideCallOutcome, fire_and_report
from spotix_api.services.mailer import SUPPORT_EMAIL, MailerSendClient
from spotix_api.services.reference_store import ReferenceStore
from spotix_api.services.retry import PollCancelled, poll
from spotix_api.services.side_calls import AuxiliaryFunctions
from spotix_api.services.ticket_ids import generate_ticket_id

logger = logging.getLogger(__name__)

PAYMENT_METHOD_IWSS = "IWSS"
PAYMENT_METHOD_FREE = "Free Ticket"


@dataclass
class IssuanceResult:
    body: Dict[str, Any]
    # Ticket copies written by this call; empty on a replay
    written: List[str] = field(default_factory=list)
    side_calls: List[SideCallOutcome] = field(default_factory=list)


def check_reference(reference: Optional[str], prefix: str) -> str:
    if not reference or not isinstance(reference, str) or not reference.strip():
        raise BadRequest("Missing required parameter: reference")
    reference = reference.strip()
    if not reference.startswith(prefix):
        raise BadRequest(f"Invalid reference format. Expected format: {prefix}{{timestamp}}")
    return reference


class TicketIssuance:
    def __init__(
        self,
        db: Session,
        settings: Settings,
        functions: AuxiliaryFunctions,
        mailer: MailerSendClient,
        id_generator: Callable[[], str] = generate_ticket_id,
    ):
        self.db = db
        self.settings = settings
        self.store = ReferenceStore(db)
        self.functions = functions
        self.mailer = mailer
        self.id_generator = id_generator

    # ---- entry points -------------------------------------------------

    async def issue_paid(self, reference: Optional[str], cancelled: Optional[Callable[[], Awaitable[bool]]] = None) -> IssuanceResult:
        reference = check_reference(reference, PAID_PREFIX)
        logger.info("Processing IWSS ticket generation for reference: %s", reference)
        try:
            record = await self._await_payment(reference, cancelled)
            return await self._issue(record, free=False)
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("IWSS ticket generation failed for %s", reference)
            raise ApiError("Failed to generate ticket via IWSS", details=str(exc)) from exc

    async def issue_free(self, reference: Optional[str]) -> IssuanceResult:
        reference = check_reference(reference, FREE_PREFIX)
        logger.info("Processing free ticket generation for reference: %s", reference)
        try:
            record = await run_in_threadpool(self.store.get, reference)
            if record is None:
                raise NotFound("Free ticket reference not found", reference=reference)
            if record.vendor != FREE_TICKET_VENDOR or record.status != STATUS_SETTLED:
                raise BadRequest("This reference is not for a free ticket", error="Invalid Reference", reference=reference)
            return await self._issue(record, free=True)
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("Free ticket generation failed for %s", reference)
            raise ApiError("Failed to generate free ticket", details=str(exc)) from exc

    # ---- steps --------------------------------------------------------

    async def _await_payment(self, reference: str, cancelled: Optional[Callable[[], Awaitable[bool]]]) -> PaymentReference:
        async def fetch() -> PaymentReference:
            record = await run_in_threadpool(self.store.get, reference)
            if record is None:
                raise NotFound("Payment reference not found", reference=reference)
            return record

        try:
            record = await poll(
                fetch,
                retry_if=lambda r: r.status == STATUS_PENDING,
                attempts=self.settings.payment_poll_attempts,
                delay=self.settings.payment_poll_delay_seconds,
                backoff=self.settings.payment_poll_backoff,
                cancelled=cancelled,
            )
        except PollCancelled:
            logger.info("Client went away while waiting on payment %s", reference)
            raise ClientDisconnected("Client disconnected while payment was pending", reference=reference)

        if record.status == STATUS_SUCCESSFUL:
            return record
        if record.status == STATUS_FAILED:
            raise PaymentRejected("Payment verification failed. Please try again or contact support.", reference=reference)
        if record.status == STATUS_PENDING:
            raise PaymentPending("Payment is still being processed. Please try again in a few moments.", reference=reference)
        raise BadRequest(f"Payment reference cannot be ticketed in status '{record.status}'", error="Invalid Reference", reference=reference)

    async def _issue(self, record: PaymentReference, free: bool) -> IssuanceResult:
        reference = record.reference
        if not record.event_id:
            raise BadRequest("Payment reference is not linked to an event", error="Invalid Reference", reference=reference)
        ticket_id = await run_in_threadpool(self.store.assign_ticket_id, reference, self.id_generator)

        user = await run_in_threadpool(self.db.get, User, record.user_id) if record.user_id else None
        if user is None:
            raise NotFound("User data not found. Please contact support.", error="User Not Found")

        now = datetime.utcnow()
        purchase_date = now.strftime("%m/%d/%Y")
        purchase_time = now.strftime("%H:%M:%S")
        payment_method = PAYMENT_METHOD_FREE if free else PAYMENT_METHOD_IWSS
        ticket_price = 0.0 if free else float(record.ticket_price or 0)
        total_amount = 0.0 if free else float(record.total_amount or 0)
        discount_code = None if free else record.discount_code

        ticket = dict(
            uid=record.user_id,
            full_name=user.display_name,
            email=user.email or "",
            phone_number=user.phone_number or "",
            ticket_type=record.ticket_type,
            ticket_reference=reference,
            purchase_date=purchase_date,
            purchase_time=purchase_time,
            verified=False,
            payment_method=payment_method,
            original_price=ticket_price,
            ticket_price=ticket_price,
            transaction_fee=0.0 if free else float(record.transaction_fee or 0),
            total_amount=total_amount,
            discount_applied=bool(discount_code),
            discount_code=discount_code,
            referral_code=record.referral_code,
            referral_name=record.referral_name,
            event_venue=record.event_venue,
            event_type=record.event_type,
            event_date=record.event_date,
            event_end_date=record.event_end_date,
            event_start=record.event_start,
            event_end=record.event_end,
            created_at=now,
        )
        result = IssuanceResult(body={})

        if await run_in_threadpool(
            self._insert_if_absent,
            TicketHistory,
            {"user_id": record.user_id, "ticket_id": ticket_id},
            lambda: TicketHistory(
                user_id=record.user_id,
                ticket_id=ticket_id,
                event_id=record.event_id,
                event_name=record.event_name,
                event_creator_id=record.event_creator_id,
                **ticket,
            ),
        ):
            result.written.append("ticket_history")

        if await run_in_threadpool(
            self._insert_if_absent,
            EventAttendee,
            {"event_id": record.event_id, "ticket_id": ticket_id},
            lambda: EventAttendee(event_id=record.event_id, ticket_id=ticket_id, event_creator_id=record.event_creator_id, **ticket),
        ):
            result.written.append("event_attendees")

        inventory = {
            "ticketId": ticket_id,
            "eventCreatorId": record.event_creator_id,
            "eventId": record.event_id,
            "ticketType": record.ticket_type,
            "ticketPrice": ticket_price,
            "discountCode": discount_code,
        }
        result.side_calls.append(await fire_and_report("atomic operations", lambda: self.functions.update_inventory(inventory)))

        referral_code = record.referral_code or record.referral_name
        if referral_code:
            usage = {"name": user.display_name or "Unknown", "ticketType": record.ticket_type, "purchaseDate": now.isoformat()}
            result.side_calls.append(
                await fire_and_report("referral update", lambda: run_in_threadpool(self._record_referral, record, referral_code, usage))
            )

        if await run_in_threadpool(
            self._insert_if_absent,
            AdminEventTicket,
            {"event_id": record.event_id, "ticket_id": ticket_id},
            lambda: AdminEventTicket(
                event_id=record.event_id,
                ticket_id=ticket_id,
                reference=reference,
                uid=record.user_id,
                ticket_price=ticket_price,
                ticket_type=record.ticket_type,
                date=now,
                purchase_date=purchase_date,
                purchase_time=purchase_time,
                event_name=record.event_name,
                event_creator_id=record.event_creator_id,
            ),
        ):
            result.written.append("admin_event_tickets")

        await run_in_threadpool(self.store.update, reference, ticket_generated=True, ticket_generated_at=now)
        logger.info("Reference %s updated - ticket generation complete", reference)

        analytics = {"ticketPrice": ticket_price, "ticketId": ticket_id, "eventId": record.event_id, "timestamp": now.isoformat()}
        result.side_calls.append(await fire_and_report("analytics update", lambda: self.functions.record_analytics(analytics)))

        result.side_calls.append(
            await fire_and_report(
                "confirmation email",
                lambda: self._send_confirmation(record, user, ticket_id, payment_method, "Free" if free else f"{ticket_price:.2f}"),
            )
        )

        result.body = {
            "success": True,
            "message": "Free ticket generated successfully" if free else "Ticket generated successfully via IWSS",
            "ticketId": ticket_id,
            "ticketReference": reference,
            "eventId": record.event_id,
            "eventName": record.event_name,
            "ticketType": record.ticket_type,
            "ticketPrice": ticket_price,
            "totalAmount": total_amount,
            "paymentMethod": payment_method,
            "userData": {"fullName": user.display_name, "email": user.email or ""},
            "eventDetails": {
                "eventVenue": record.event_venue,
                "eventType": record.event_type,
                "eventDate": record.event_date,
                "eventEndDate": record.event_end_date,
                "eventStart": record.event_start,
                "eventEnd": record.event_end,
                "bookerName": record.booker_name,
                "bookerEmail": record.booker_email,
            },
            "discountApplied": bool(discount_code),
            "referralUsed": bool(record.referral_code),
        }
        return result

    # ---- helpers ------------------------------------------------------

    def _insert_if_absent(self, model, key: Dict[str, Any], build: Callable[[], Any]) -> bool:
        """First write wins; returns False when the row already exists."""
        name = model.__tablename__
        if self.db.get(model, key) is not None:
            logger.info("Ticket already exists in %s: %s", name, key)
            return False
        self.db.add(build())
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # still missing means the insert itself was rejected, not raced
            if self.db.get(model, key) is None:
                raise
            logger.info("Ticket written concurrently in %s: %s", name, key)
            return False
        logger.info("Ticket created in %s: %s", name, key)
        return True

    def _record_referral(self, record: PaymentReference, code: str, usage: Dict[str, Any]) -> str:
        try:
            referral = (
                self.db.query(Referral)
                .filter(
                    Referral.event_creator_id == record.event_creator_id,
                    Referral.event_id == record.event_id,
                    Referral.code == code,
                )
                .with_for_update()
                .populate_existing()
                .one_or_none()
            )
            if referral is None:
                self.db.rollback()
                return "unknown referral code"
            referral.usages = [*(referral.usages or []), usage]
            referral.total_tickets = (referral.total_tickets or 0) + 1
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info("Referral code %s updated", code)
        return "updated"

    async def _send_confirmation(self, record: PaymentReference, user: User, ticket_id: str, payment_method: str, price_label: str) -> str:
        if not user.email:
            logger.warning("User %s has no email - skipping confirmation email", user.id)
            return "skipped"
        await self.mailer.send_payment_confirmation(
            email=user.email,
            name=user.display_name or "Valued Customer",
            ticket_id=ticket_id,
            event_name=record.event_name or "",
            payment_ref=record.reference,
            payment_method=payment_method,
            event_host=record.booker_name or "Event Host",
            ticket_type=record.ticket_type,
            booker_email=record.booker_email or SUPPORT_EMAIL,
            ticket_price=price_label,
        )
        return "sent"
