"""
Rental lifecycle: renting and unrenting a property.

``Property.is_available`` is a stored projection of "no ACTIVE rental exists
for this property". Both operations here change the rental row and the flag
in one transaction, so no reader ever sees them disagree.

Concurrent attempts to rent the same property are serialised by locking the
property row (``SELECT ... FOR UPDATE``) before the availability check. The
partial unique index on ``rentals(property_id) WHERE status = 'ACTIVE'``
backs this up on stores without row locks: the losing insert fails with an
IntegrityError and is reported as a conflict.
"""
import logging
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.core.errors import ConflictError, NotFoundError, TransactionError, UnauthorizedError
from marketplace.models.notification import RENTAL_CANCELLED, RENTAL_CREATED
from marketplace.models.property import Property
from marketplace.models.rental import ACTIVE, CANCELLED, Rental
from marketplace.models.user import User
from marketplace.services.notifications import notify

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Property is not available for rent"
ALREADY_RENTED = "You already have an active rental for this property"
NO_ACTIVE_RENTAL = "No active rental found for this property"


def _lock_property(db: Session, property_id: str) -> Optional[Property]:
    return (
        db.query(Property)
        .filter(Property.id == property_id)
        .with_for_update()
        .first()
    )


def _set_availability(db: Session, prop: Property, available: bool) -> None:
    prop.is_available = available
    db.flush()


def get_active_rental(
    db: Session, *, property_id: str, tenant_id: Optional[str] = None
) -> Optional[Rental]:
    q = db.query(Rental).filter(Rental.property_id == property_id, Rental.status == ACTIVE)
    if tenant_id is not None:
        q = q.filter(Rental.tenant_id == tenant_id)
    return q.first()


def create_rental(db: Session, *, property_id: str, tenant_id: str, start_date: date) -> Rental:
    """
    Rent an available property.

    Raises NotFoundError if the property or tenant does not exist,
    ConflictError if it is not available or the tenant already rents it,
    TransactionError if the write fails (nothing is persisted in that case).
    """
    prop = _lock_property(db, property_id)
    if not prop:
        raise NotFoundError("Property not found")
    if not db.query(User.id).filter(User.id == tenant_id).first():
        raise NotFoundError("User not found")
    if not prop.is_available:
        raise ConflictError(NOT_AVAILABLE)
    if get_active_rental(db, property_id=property_id, tenant_id=tenant_id):
        raise ConflictError(ALREADY_RENTED)

    rental = Rental(
        property_id=property_id,
        tenant_id=tenant_id,
        start_date=start_date,
        status=ACTIVE,
    )
    try:
        db.add(rental)
        db.flush()
        _set_availability(db, prop, False)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Concurrent rental rejected for property %s (tenant %s)", property_id, tenant_id)
        raise ConflictError(NOT_AVAILABLE)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Rental transaction failed for property %s", property_id)
        raise TransactionError("Failed to rent property") from e

    db.refresh(rental)
    logger.info("Property %s rented by tenant %s (rental %s)", property_id, tenant_id, rental.id)

    notify(
        db,
        user_id=prop.owner_id,
        message=f"Your property {prop.title} has been rented starting {start_date.isoformat()}",
        type=RENTAL_CREATED,
    )
    return rental


def cancel_rental(db: Session, *, property_id: str, tenant_id: str) -> Tuple[str, str]:
    """
    Cancel the caller's ACTIVE rental on a property and make it available again.

    Only the tenant of record may cancel. Returns (rental_id, property_id).
    """
    prop = _lock_property(db, property_id)

    rental = get_active_rental(db, property_id=property_id, tenant_id=tenant_id)
    if rental is None:
        if prop is not None and get_active_rental(db, property_id=property_id) is not None:
            raise UnauthorizedError("Only the tenant of record can cancel this rental")
        raise NotFoundError(NO_ACTIVE_RENTAL)

    rental_id = rental.id
    try:
        # conditional on status so a racing cancel cannot apply twice
        updated = (
            db.query(Rental)
            .filter(Rental.id == rental_id, Rental.status == ACTIVE)
            .update(
                {Rental.status: CANCELLED, Rental.end_date: datetime.now(timezone.utc)},
                synchronize_session="fetch",
            )
        )
        if updated != 1:
            db.rollback()
            raise NotFoundError(NO_ACTIVE_RENTAL)
        _set_availability(db, prop, True)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Cancellation transaction failed for rental %s", rental_id)
        raise TransactionError("Failed to unrent property") from e

    logger.info("Rental %s on property %s cancelled by tenant %s", rental_id, property_id, tenant_id)

    notify(
        db,
        user_id=prop.owner_id,
        message=f"The rental of your property {prop.title} has been cancelled",
        type=RENTAL_CANCELLED,
    )
    return rental_id, property_id
