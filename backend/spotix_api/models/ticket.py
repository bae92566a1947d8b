from sqlalchemy import String, Boolean, DateTime, Float
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from spotix_api.models.base import Base

class TicketFields:
    """Columns shared by the per-user and per-event copies of an issued ticket."""
    uid: Mapped[str] = mapped_column(String(128))
    full_name: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str] = mapped_column(String(255), default="")
    phone_number: Mapped[str] = mapped_column(String(32), default="")
    ticket_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    ticket_reference: Mapped[str] = mapped_column(String(64), index=True)
    purchase_date: Mapped[str] = mapped_column(String(16))
    purchase_time: Mapped[str] = mapped_column(String(16))
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    payment_method: Mapped[str] = mapped_column(String(32))
    original_price: Mapped[float] = mapped_column(Float, default=0)
    ticket_price: Mapped[float] = mapped_column(Float, default=0)
    transaction_fee: Mapped[float] = mapped_column(Float, default=0)
    total_amount: Mapped[float] = mapped_column(Float, default=0)
    discount_applied: Mapped[bool] = mapped_column(Boolean, default=False)
    discount_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    referral_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    referral_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    event_venue: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    event_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    event_end_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    event_start: Mapped[str | None] = mapped_column(String(32), nullable=True)
    event_end: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime)

class TicketHistory(TicketFields, Base):
    """A user's own copy of every ticket they hold."""
    __tablename__ = "ticket_history"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    event_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    event_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_creator_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

class EventAttendee(TicketFields, Base):
    """Attendee list of an event, read by the event creator."""
    __tablename__ = "event_attendees"

    event_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    event_creator_id: Mapped[str | None] = mapped_column(String(128), index=True, nullable=True)

class AdminEventTicket(Base):
    """Platform ledger row per ticket sold for an event."""
    __tablename__ = "admin_event_tickets"

    event_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    reference: Mapped[str] = mapped_column(String(64))
    uid: Mapped[str] = mapped_column(String(128))
    ticket_price: Mapped[float] = mapped_column(Float, default=0)
    ticket_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime)
    purchase_date: Mapped[str] = mapped_column(String(16))
    purchase_time: Mapped[str] = mapped_column(String(16))
    event_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_creator_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
