import json

from spotix_api.core.security import compute_signature
from spotix_api.models.reference import PaymentReference


def charge_event(event="charge.success", reference="SPTX-REF-1700000000", tx_type="ticket_purchase"):
    data = {
        "reference": reference,
        "amount": 515000,
        "currency": "NGN",
        "customer": {"email": "ada@example.com", "customer_code": "CUS_123"},
        "metadata": {"custom_fields": [{"display_name": "Type", "variable_name": "type", "value": tx_type}]},
    }
    return {"event": event, "data": data}


def post_signed(client, secret, payload, signature=None):
    raw = json.dumps(payload).encode()
    sig = signature if signature is not None else compute_signature(secret, raw)
    return client.post("/webhook", content=raw, headers={"x-paystack-signature": sig, "content-type": "application/json"})


def test_charge_success_marks_reference_successful(client, db, test_settings, seed_reference):
    seed_reference(status="pending")
    r = post_signed(client, test_settings.paystack_secret_key, charge_event())
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "successful"
    ref = db.get(PaymentReference, "SPTX-REF-1700000000")
    assert ref.status == "successful"
    assert ref.payment_event == "charge.success"
    assert ref.amount == 515000
    assert ref.customer_code == "CUS_123"


def test_charge_failed_marks_reference_failed(client, db, test_settings, seed_reference):
    seed_reference(status="pending")
    r = post_signed(client, test_settings.paystack_secret_key, charge_event(event="charge.failed"))
    assert r.status_code == 200
    assert db.get(PaymentReference, "SPTX-REF-1700000000").status == "failed"


def test_bad_signature_is_rejected_without_mutation(client, db, test_settings, seed_reference):
    seed_reference(status="pending")
    r = post_signed(client, test_settings.paystack_secret_key, charge_event(), signature="deadbeef")
    assert r.status_code == 401
    assert db.get(PaymentReference, "SPTX-REF-1700000000").status == "pending"


def test_signature_from_other_secret_is_rejected(client, db, seed_reference):
    seed_reference(status="pending")
    r = post_signed(client, "not-the-secret", charge_event())
    assert r.status_code == 401
    assert db.get(PaymentReference, "SPTX-REF-1700000000").status == "pending"


def test_missing_signature_is_rejected(client):
    r = client.post("/webhook", json=charge_event())
    assert r.status_code == 401


def test_unhandled_event_is_acknowledged(client, db, test_settings, seed_reference):
    seed_reference(status="pending")
    r = post_signed(client, test_settings.paystack_secret_key, {"event": "transfer.success", "data": {"reference": "SPTX-REF-1700000000"}})
    assert r.status_code == 200
    assert r.json()["message"] == "Event received but not processed"
    assert db.get(PaymentReference, "SPTX-REF-1700000000").status == "pending"


def test_missing_reference(client, test_settings):
    payload = charge_event()
    del payload["data"]["reference"]
    r = post_signed(client, test_settings.paystack_secret_key, payload)
    assert r.status_code == 400


def test_unknown_reference(client, test_settings):
    r = post_signed(client, test_settings.paystack_secret_key, charge_event(reference="SPTX-REF-missing"))
    assert r.status_code == 404
    assert r.json()["reference"] == "SPTX-REF-missing"


def test_non_ticket_transaction_is_not_applied(client, db, test_settings, seed_reference):
    seed_reference(status="pending")
    r = post_signed(client, test_settings.paystack_secret_key, charge_event(tx_type="wallet_topup"))
    assert r.status_code == 200
    assert r.json()["message"] == "Transaction received but not a ticket purchase"
    assert db.get(PaymentReference, "SPTX-REF-1700000000").status == "pending"


def test_ticket_purchase_gate_can_be_disabled(client, db, test_settings, seed_reference):
    test_settings.webhook_require_ticket_purchase = False
    seed_reference(status="pending")
    r = post_signed(client, test_settings.paystack_secret_key, charge_event(tx_type=None))
    assert r.status_code == 200, r.text
    assert db.get(PaymentReference, "SPTX-REF-1700000000").status == "successful"


def test_missing_secret_is_server_error(client, test_settings):
    test_settings.paystack_secret_key = None
    r = client.post("/webhook", json=charge_event())
    assert r.status_code == 500


def test_webhook_health(client):
    assert client.get("/webhook/health").json()["status"] == "active"
