import json

import httpx
import pytest

from spotix_api.api.deps import get_gemini, get_mailer, get_mailjet
from spotix_api.main import app
from spotix_api.services.enhancer import GeminiClient
from spotix_api.services.mailer import TEMPLATE_PAYMENT_CONFIRMATION, MailerSendClient, MailjetClient

EVENT = {
    "eventName": "Lagos Jazz Night",
    "eventDescription": "jazz and drinks",
    "eventDate": "2026-12-24",
    "eventVenue": "Eko Hotel",
    "eventType": "Concert",
}


@pytest.fixture
def outbound(client):
    """Captures provider requests; every provider answers with ``outbound.reply``."""
    class Outbound:
        requests = []
        reply = httpx.Response(202)

    def handler(request: httpx.Request):
        Outbound.requests.append(request)
        return Outbound.reply

    transport = httpx.MockTransport(handler)
    app.dependency_overrides[get_gemini] = lambda: GeminiClient("gemini-test", transport=transport)
    app.dependency_overrides[get_mailer] = lambda: MailerSendClient("ms-test", transport=transport)
    app.dependency_overrides[get_mailjet] = lambda: MailjetClient("mj-public", "mj-private", transport=transport)
    yield Outbound
    Outbound.requests = []


def test_enhance_returns_model_text(client, outbound):
    outbound.reply = httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "  An unforgettable night of jazz.  "}]}}]})
    r = client.post("/enhance", json=EVENT)
    assert r.status_code == 200, r.text
    assert r.json() == {"enhancedDescription": "An unforgettable night of jazz."}
    sent = outbound.requests[0]
    assert sent.url.path.endswith("/models/gemini-1.5-pro:generateContent")
    prompt = json.loads(sent.content)["contents"][0]["parts"][0]["text"]
    assert 'Original Description: "jazz and drinks"' in prompt


def test_enhance_missing_fields(client, outbound):
    r = client.post("/enhance", json={"eventName": "x"})
    assert r.status_code == 400
    assert r.json()["message"] == "Missing required event details"
    assert outbound.requests == []


def test_enhance_model_error(client, outbound):
    outbound.reply = httpx.Response(429, json={"error": {"message": "quota exceeded"}})
    r = client.post("/enhance", json=EVENT)
    assert r.status_code == 500
    assert r.json()["details"] == "quota exceeded"


def test_payment_confirmation_mail(client, outbound):
    r = client.post("/api/mail/payment-confirmation", json={
        "email": "ada@example.com",
        "name": "Ada",
        "ticket_ID": "SPTX-TX-12A345B678",
        "event_name": "Lagos Jazz Night",
        "payment_ref": "SPTX-REF-1",
        "payment_method": "IWSS",
    })
    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "message": "Payment confirmation email sent successfully"}
    body = json.loads(outbound.requests[0].content)
    assert body["template_id"] == TEMPLATE_PAYMENT_CONFIRMATION
    assert body["subject"] == "Your Ticket for Lagos Jazz Night"
    assert body["personalization"][0]["data"]["ticket_type"] == "Standard"


def test_password_reset_missing_fields(client, outbound):
    r = client.post("/api/mail/password-reset", json={"email": "ada@example.com"})
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert outbound.requests == []


def test_mail_provider_failure(client, outbound):
    outbound.reply = httpx.Response(500, text="oops")
    r = client.post("/api/mail/booker-confirmation", json={"email": "ada@example.com", "name": "Ada"})
    assert r.status_code == 500
    assert r.json()["message"] == "Failed to send booker confirmation email"


def test_mail_not_configured(client):
    app.dependency_overrides[get_mailer] = lambda: MailerSendClient(None)
    r = client.post("/api/mail/email-verification", json={"email": "a@b.c", "name": "A", "action_url": "https://x"})
    assert r.status_code == 500


def test_team_member_added(client, outbound):
    outbound.reply = httpx.Response(200, json={"Messages": [{"Status": "success"}]})
    r = client.post("/api/notify/team-member-added", json={
        "collaborationId": "c1",
        "eventId": "ev1",
        "bookerId": "b1",
        "userRole": "Check-in",
        "eventName": "Lagos Jazz Night",
        "bookerName": "Jazz Co",
        "username": "ada",
        "email": "ada@example.com",
    })
    assert r.status_code == 200, r.text
    message = json.loads(outbound.requests[0].content)["Messages"][0]
    assert message["To"] == [{"Email": "ada@example.com", "Name": "ada"}]
    assert message["Variables"]["UserRole"] == "Check-in"
    assert outbound.requests[0].headers["authorization"].startswith("Basic ")


def test_team_member_added_missing_fields(client, outbound):
    r = client.post("/api/notify/team-member-added", json={"email": "ada@example.com"})
    assert r.status_code == 400
