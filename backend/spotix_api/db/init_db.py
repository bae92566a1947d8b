import logging

from spotix_api.db.session import engine, SessionLocal
from spotix_api.models import reference, referral, ticket, user  # noqa: F401
from spotix_api.models.base import Base
from spotix_api.models.reference import PaymentReference, FREE_TICKET_VENDOR, STATUS_SETTLED
from spotix_api.models.referral import Referral
from spotix_api.models.user import User

logger = logging.getLogger(__name__)

DEMO_USER_ID = "demo-user"
DEMO_CREATOR_ID = "demo-creator"
DEMO_EVENT_ID = "demo-event"
DEMO_FREE_REFERENCE = "SPTX-FREE-DEMO"

def create_tables():
    Base.metadata.create_all(bind=engine)

def seed_demo_data():
    """Idempotent dev seed: one attendee, one referral code and a claimable free reference."""
    db = SessionLocal()
    try:
        if not db.get(User, DEMO_USER_ID):
            db.add(User(id=DEMO_USER_ID, full_name="Demo Attendee", username="demo", email="demo@example.com", phone_number=""))
        if not db.get(Referral, {"event_creator_id": DEMO_CREATOR_ID, "event_id": DEMO_EVENT_ID, "code": "DEMO"}):
            db.add(Referral(event_creator_id=DEMO_CREATOR_ID, event_id=DEMO_EVENT_ID, code="DEMO", usages=[], total_tickets=0))
        if not db.get(PaymentReference, DEMO_FREE_REFERENCE):
            db.add(PaymentReference(
                reference=DEMO_FREE_REFERENCE,
                status=STATUS_SETTLED,
                vendor=FREE_TICKET_VENDOR,
                user_id=DEMO_USER_ID,
                event_id=DEMO_EVENT_ID,
                event_creator_id=DEMO_CREATOR_ID,
                event_name="Demo Meetup",
                ticket_type="General Admission",
                event_venue="Lagos",
                event_type="Meetup",
                booker_name="Demo Host",
                referral_code="DEMO",
            ))
        db.commit()
        logger.info("[seed] demo data ready")
    finally:
        db.close()
