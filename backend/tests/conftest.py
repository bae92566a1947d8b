import os
import tempfile

# Must happen before spotix_api is imported: the engine is built from DATABASE_URL at import.
_tmpdir = tempfile.mkdtemp(prefix="spotix-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmpdir, "test.db")
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from spotix_api.api.deps import get_aux_functions, get_mailer
from spotix_api.core.config import Settings, get_settings
from spotix_api.db.session import SessionLocal, engine
from spotix_api.main import app
from spotix_api.models.base import Base
from spotix_api.models.reference import PaymentReference
from spotix_api.models.referral import Referral
from spotix_api.models.user import User

WEBHOOK_SECRET = "sk_test_webhook_secret"


class FakeFunctions:
    """Stands in for the inventory and analytics HTTP functions."""

    def __init__(self):
        self.inventory_calls = []
        self.analytics_calls = []
        self.fail = False

    async def update_inventory(self, payload):
        self.inventory_calls.append(payload)
        if self.fail:
            raise RuntimeError("atomic function unavailable")
        return "processed"

    async def record_analytics(self, payload):
        self.analytics_calls.append(payload)
        if self.fail:
            raise RuntimeError("analytics function unavailable")
        return "processed"


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_payment_confirmation(self, **kwargs):
        self.sent.append(kwargs)
        if self.fail:
            raise RuntimeError("mail provider down")


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def test_settings():
    return Settings(
        PAYSTACK_SECRET_KEY=WEBHOOK_SECRET,
        APP_URL="https://spotix.test",
        PAYMENT_POLL_ATTEMPTS=3,
        PAYMENT_POLL_DELAY_SECONDS=0,
        GEMINI_API_KEY="gemini-test",
        MAILERSEND_API_KEY="ms-test",
        MJ_APIKEY_PUBLIC="mj-public",
        MJ_APIKEY_PRIVATE="mj-private",
    )


@pytest.fixture
def functions():
    return FakeFunctions()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(test_settings, functions, mailer):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_aux_functions] = lambda: functions
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


def _add(obj):
    session = SessionLocal()
    try:
        session.add(obj)
        session.commit()
    finally:
        session.close()
    return obj


@pytest.fixture
def seed_user():
    def _seed(user_id="u1", **overrides):
        fields = dict(id=user_id, full_name="Ada Obi", username="ada", email="ada@example.com", phone_number="08030000000")
        fields.update(overrides)
        return _add(User(**fields))
    return _seed


@pytest.fixture
def seed_reference():
    def _seed(reference="SPTX-REF-1700000000", **overrides):
        fields = dict(
            reference=reference,
            status="successful",
            user_id="u1",
            event_id="ev1",
            event_creator_id="creator1",
            event_name="Lagos Jazz Night",
            ticket_type="VIP",
            ticket_price=5000.0,
            transaction_fee=150.0,
            total_amount=5150.0,
            event_venue="Eko Hotel",
            event_type="Concert",
            event_date="2026-12-24",
            event_start="19:00",
            event_end="23:00",
            booker_name="Jazz Co",
            booker_email="host@jazz.example",
        )
        fields.update(overrides)
        return _add(PaymentReference(**fields))
    return _seed


@pytest.fixture
def seed_referral():
    def _seed(code="FRIEND10", event_creator_id="creator1", event_id="ev1"):
        return _add(Referral(event_creator_id=event_creator_id, event_id=event_id, code=code, usages=[], total_tickets=0))
    return _seed
