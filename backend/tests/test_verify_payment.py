def test_returns_snapshot(client, seed_reference):
    seed_reference(status="pending", discount_code="EARLY", discount_data={"percent": 10})
    r = client.get("/verify-payment", params={"ref": "SPTX-REF-1700000000"})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["status"] == "pending"
    assert data["ticketPrice"] == 5000.0
    assert data["discountData"] == {"percent": 10}
    assert data["ticketId"] is None


def test_missing_ref(client):
    r = client.get("/verify-payment")
    assert r.status_code == 400
    assert r.json()["message"] == "Missing required parameter: ref"


def test_bad_prefix(client):
    r = client.get("/verify-payment", params={"ref": "ABC-1"})
    assert r.status_code == 400


def test_foreign_params_rejected(client):
    r = client.get("/verify-payment", params={"ref": "SPTX-REF-1", "debug": "1"})
    assert r.status_code == 400
    assert r.json()["allowedParameters"] == ["ref"]


def test_unknown_reference(client):
    r = client.get("/verify-payment", params={"ref": "SPTX-REF-unknown"})
    assert r.status_code == 404


def test_health(client):
    assert client.get("/verify-payment/health").status_code == 200
    assert client.get("/health").json()["status"] == "healthy"
