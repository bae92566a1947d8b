from sqlalchemy import String, Boolean, DateTime, Float, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from spotix_api.models.base import Base

PAID_PREFIX = "SPTX-REF-"
FREE_PREFIX = "SPTX-FREE-"

# pending | successful | failed | settled
STATUS_PENDING = "pending"
STATUS_SUCCESSFUL = "successful"
STATUS_FAILED = "failed"
STATUS_SETTLED = "settled"

FREE_TICKET_VENDOR = "free ticket"

class PaymentReference(Base):
    """One payment (or free-ticket claim) attempt, keyed by its reference string."""
    __tablename__ = "payment_references"

    reference: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[str] = mapped_column(String(16), default=STATUS_PENDING, index=True)
    vendor: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Event / ticket snapshot copied when the reference was created
    event_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    event_creator_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    event_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ticket_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    ticket_price: Mapped[float] = mapped_column(Float, default=0)
    transaction_fee: Mapped[float] = mapped_column(Float, default=0)
    total_amount: Mapped[float] = mapped_column(Float, default=0)
    discount_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    discount_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    referral_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    referral_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    event_venue: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    event_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    event_end_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    event_start: Mapped[str | None] = mapped_column(String(32), nullable=True)
    event_end: Mapped[str | None] = mapped_column(String(32), nullable=True)
    booker_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    booker_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Issuance state
    ticket_id: Mapped[str | None] = mapped_column(String(32), unique=True, nullable=True)
    ticket_id_generated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    ticket_generated: Mapped[bool] = mapped_column(Boolean, default=False)
    ticket_generated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Filled in by the gateway webhook
    payment_event: Mapped[str | None] = mapped_column(String(64), nullable=True)
    transaction_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str | None] = mapped_column(String(8), nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_code: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
