import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from marketplace.api.deps import get_db
from marketplace.core.auth import TENANT, CurrentUser, require_role
from marketplace.core.errors import NotFoundError
from marketplace.models.payment import Payment
from marketplace.schemas.payment import PaymentCreate, PaymentOut
from marketplace.services.rentals import get_active_rental

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenant/payments", tags=["payments"])


@router.post("", response_model=PaymentOut)
def record_payment(
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(TENANT)),
):
    """
    Record a rent payment against the caller's ACTIVE rental. The charge
    itself happens at the payment provider; this only stores the receipt.
    """
    rental = get_active_rental(db, property_id=payload.property_id, tenant_id=current_user.id)
    if not rental:
        raise NotFoundError("No active rental found for this property")

    paid_at_utc = datetime.now(timezone.utc)
    payment = Payment(
        rental_id=rental.id,
        property_id=rental.property_id,
        tenant_id=current_user.id,
        period_start=paid_at_utc.date().replace(day=1),  # First day of the month
        amount=payload.amount if payload.amount is not None else rental.property.amount,
        method=payload.method,
        status="paid",
        paid_at=paid_at_utc,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info("Payment %s recorded for rental %s", payment.id, rental.id)
    return payment


@router.get("", response_model=List[PaymentOut])
def list_payments(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(TENANT)),
):
    return (
        db.query(Payment)
        .filter(Payment.tenant_id == current_user.id)
        .order_by(Payment.paid_at.desc())
        .all()
    )
