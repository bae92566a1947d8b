"""Access to payment reference records.

``assign_ticket_id`` is the only cross-request coordination point: the row is
locked (``SELECT ... FOR UPDATE`` on Postgres) while the id is read or minted,
so concurrent retries for one reference all end up with the same ticket id.
"""
import logging
from datetime import datetime
from typing import Any, Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from spotix_api.core.errors import TransactionFailed
from spotix_api.models.reference import PaymentReference
from spotix_api.services.ticket_ids import generate_ticket_id

logger = logging.getLogger(__name__)

# Fresh ids tried when the minted one already belongs to another reference
MAX_ID_COLLISIONS = 5


class ReferenceStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, reference: str) -> PaymentReference | None:
        # populate_existing: a poll must see rows committed by other requests
        return (
            self.db.query(PaymentReference)
            .filter(PaymentReference.reference == reference)
            .populate_existing()
            .one_or_none()
        )

    def update(self, reference: str, **patch: Any) -> PaymentReference | None:
        record = self.db.get(PaymentReference, reference)
        if record is None:
            return None
        for key, value in patch.items():
            if not hasattr(PaymentReference, key):
                raise AttributeError(f"PaymentReference has no field '{key}'")
            setattr(record, key, value)
        record.updated_at = datetime.utcnow()
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return record

    def assign_ticket_id(self, reference: str, generator: Callable[[], str] = generate_ticket_id) -> str:
        """Return the reference's ticket id, minting and storing one if it has none."""
        for _ in range(MAX_ID_COLLISIONS):
            try:
                record = (
                    self.db.query(PaymentReference)
                    .filter(PaymentReference.reference == reference)
                    .with_for_update()
                    .populate_existing()
                    .one_or_none()
                )
                if record is None:
                    self.db.rollback()
                    raise TransactionFailed(
                        "Failed to generate ticket ID atomically: reference not found during transaction",
                        reference=reference,
                    )
                if record.ticket_id:
                    self.db.commit()  # release the row lock
                    logger.info("Existing ticket ID found in transaction: %s", record.ticket_id)
                    return record.ticket_id
                ticket_id = generator()
                now = datetime.utcnow()
                record.ticket_id = ticket_id
                record.ticket_id_generated_at = now
                record.updated_at = now
                self.db.commit()
                logger.info("Generated new ticket ID in transaction: %s", ticket_id)
                return ticket_id
            except IntegrityError:
                # ticket_id is UNIQUE: another reference already owns this id
                self.db.rollback()
                logger.warning("Ticket ID collision for reference %s, generating a new one", reference)
            except SQLAlchemyError as exc:
                self.db.rollback()
                raise TransactionFailed(f"Failed to generate ticket ID atomically: {exc}", reference=reference) from exc
        raise TransactionFailed("Failed to generate ticket ID atomically: too many identifier collisions", reference=reference)
