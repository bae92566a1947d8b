import asyncio
import random
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from spotix_api.core.errors import TransactionFailed
from spotix_api.core.security import compute_signature, verify_signature
from spotix_api.db.session import SessionLocal
from spotix_api.models.reference import PaymentReference
from spotix_api.models.ticket import TicketHistory
from spotix_api.services.best_effort import fire_and_report
from spotix_api.services.issuance import TicketIssuance
from spotix_api.services.reference_store import ReferenceStore
from spotix_api.services.retry import PollCancelled, poll
from spotix_api.services.ticket_ids import TICKET_ID_PATTERN, generate_ticket_id


def test_ticket_id_shape():
    rng = random.Random(7)
    for _ in range(500):
        ticket_id = generate_ticket_id(rng)
        assert TICKET_ID_PATTERN.match(ticket_id), ticket_id
        body = ticket_id[len("SPTX-TX-"):]
        assert sum(c.isdigit() for c in body) == 8
        assert sum(c.isalpha() for c in body) == 2


def test_poll_stops_when_condition_met():
    results = iter(["pending", "pending", "successful"])
    calls = []

    async def fetch():
        value = next(results)
        calls.append(value)
        return value

    out = asyncio.run(poll(fetch, lambda s: s == "pending", attempts=5, delay=0))
    assert out == "successful"
    assert len(calls) == 3


def test_poll_returns_last_result_when_exhausted():
    calls = []

    async def fetch():
        calls.append(1)
        return "pending"

    assert asyncio.run(poll(fetch, lambda s: s == "pending", attempts=3, delay=0)) == "pending"
    assert len(calls) == 3


def test_poll_honours_cancellation():
    async def gone():
        return True

    async def fetch():
        return "pending"

    with pytest.raises(PollCancelled):
        asyncio.run(poll(fetch, lambda s: True, attempts=3, delay=0, cancelled=gone))


def test_fire_and_report_swallows_errors():
    async def broken():
        raise RuntimeError("down")

    async def fine():
        return "done"

    failed = asyncio.run(fire_and_report("analytics", broken))
    assert failed.ok is False and failed.detail == "down"
    ok = asyncio.run(fire_and_report("analytics", fine))
    assert ok.ok is True and ok.detail == "done"


def test_signature_round_trip():
    sig = compute_signature("secret", b'{"event":"charge.success"}')
    assert len(sig) == 128
    assert verify_signature("secret", b'{"event":"charge.success"}', sig)
    assert not verify_signature("secret", b'{"event":"charge.failed"}', sig)
    assert not verify_signature("secret", b"{}", None)


def test_assign_ticket_id_is_idempotent(db, seed_reference):
    seed_reference()
    store = ReferenceStore(db)
    ids = iter(["SPTX-TX-12A345B678", "SPTX-TX-99Z999Y999"])
    first = store.assign_ticket_id("SPTX-REF-1700000000", lambda: next(ids))
    second = store.assign_ticket_id("SPTX-REF-1700000000", lambda: next(ids))
    assert first == second == "SPTX-TX-12A345B678"
    assert db.get(PaymentReference, "SPTX-REF-1700000000").ticket_id_generated_at is not None


def test_assign_ticket_id_retries_on_collision(db, seed_reference):
    seed_reference(reference="SPTX-REF-1", ticket_id="SPTX-TX-12A345B678")
    seed_reference(reference="SPTX-REF-2")
    store = ReferenceStore(db)
    ids = iter(["SPTX-TX-12A345B678", "SPTX-TX-34C567D890"])
    assert store.assign_ticket_id("SPTX-REF-2", lambda: next(ids)) == "SPTX-TX-34C567D890"


def test_assign_ticket_id_unknown_reference(db):
    with pytest.raises(TransactionFailed):
        ReferenceStore(db).assign_ticket_id("SPTX-REF-missing")


def test_update_unknown_reference_returns_none(db):
    assert ReferenceStore(db).update("SPTX-REF-missing", status="failed") is None


def _history_row(ticket_id):
    return TicketHistory(
        user_id="u1",
        ticket_id=ticket_id,
        uid="u1",
        ticket_reference="SPTX-REF-1700000000",
        purchase_date="12/24/2026",
        purchase_time="19:00:00",
        payment_method="IWSS",
        created_at=datetime.utcnow(),
    )


def test_insert_if_absent_counts_concurrent_insert_as_written(db, test_settings, functions, mailer):
    issuance = TicketIssuance(db, test_settings, functions, mailer)
    key = {"user_id": "u1", "ticket_id": "SPTX-TX-12A345B678"}

    def build():
        # another request commits the same ticket between our check and our insert
        other = SessionLocal()
        try:
            other.add(_history_row("SPTX-TX-12A345B678"))
            other.commit()
        finally:
            other.close()
        return _history_row("SPTX-TX-12A345B678")

    assert issuance._insert_if_absent(TicketHistory, key, build) is False
    assert db.query(TicketHistory).count() == 1


def test_insert_if_absent_raises_when_insert_is_rejected(db, test_settings, functions, mailer):
    issuance = TicketIssuance(db, test_settings, functions, mailer)
    key = {"user_id": "u1", "ticket_id": "SPTX-TX-12A345B678"}
    # uid and the purchase fields are NOT NULL
    with pytest.raises(IntegrityError):
        issuance._insert_if_absent(TicketHistory, key, lambda: TicketHistory(user_id="u1", ticket_id="SPTX-TX-12A345B678"))
    assert db.query(TicketHistory).count() == 0


def test_issuance_reports_writes_and_side_calls(db, seed_user, seed_reference, test_settings, functions, mailer):
    seed_user()
    seed_reference()
    issuance = TicketIssuance(db, test_settings, functions, mailer)

    first = asyncio.run(issuance.issue_paid("SPTX-REF-1700000000"))
    assert first.written == ["ticket_history", "event_attendees", "admin_event_tickets"]
    assert [o.name for o in first.side_calls] == ["atomic operations", "analytics update", "confirmation email"]
    assert all(o.ok for o in first.side_calls)

    functions.fail = True
    replay = asyncio.run(issuance.issue_paid("SPTX-REF-1700000000"))
    assert replay.body["ticketId"] == first.body["ticketId"]
    assert replay.written == []
    assert [o.ok for o in replay.side_calls] == [False, False, True]
