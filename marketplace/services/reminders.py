"""
Monthly rent reminders.

Rent is due on the rental's start day-of-month, in the month after the
current one. A reminder goes out REMINDER_LEAD_DAYS before that date.
"""
import logging
from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from marketplace.core.config import settings
from marketplace.models.notification import Notification, RENT_REMINDER, RENT_REMINDER_SENT
from marketplace.models.property import Property
from marketplace.models.rental import ACTIVE, Rental
from marketplace.services.notifications import create_notification

logger = logging.getLogger(__name__)


def next_payment_date(start_date: date, today: date) -> date:
    """
    Same day as start_date, next month relative to today.
    Jan 31 start -> Feb 28/29 when the next month is February.
    """
    if today.month == 12:
        year, month = today.year + 1, 1
    else:
        year, month = today.year, today.month + 1
    _, last_day = monthrange(year, month)
    return date(year, month, min(start_date.day, last_day))


def reminder_date_for(due_date: date) -> date:
    return due_date - timedelta(days=settings.REMINDER_LEAD_DAYS)


def _active_rentals(db: Session, user_id: Optional[str] = None) -> List[Rental]:
    q = (
        db.query(Rental)
        .options(
            selectinload(Rental.property).selectinload(Property.owner),
            selectinload(Rental.tenant),
        )
        .filter(Rental.status == ACTIVE)
    )
    if user_id is not None:
        q = q.join(Property, Rental.property_id == Property.id).filter(
            or_(Rental.tenant_id == user_id, Property.owner_id == user_id)
        )
    return q.order_by(Rental.created_at).all()


def _detail(rental: Rental, due: date) -> dict:
    return {
        "rental_id": rental.id,
        "property_title": rental.property.title,
        "tenant_name": rental.tenant.name,
        "owner_name": rental.property.owner.name,
        "reminder_date": reminder_date_for(due),
        "due_date": due,
        "amount": rental.property.amount,
    }


def rentals_due_soon(db: Session, *, user_id: str, today: date) -> List[Rental]:
    """ACTIVE rentals of the user (as tenant or owner) due within the lead window."""
    window_end = today + timedelta(days=settings.REMINDER_LEAD_DAYS)
    due = []
    for rental in _active_rentals(db, user_id):
        next_due = next_payment_date(rental.start_date, today)
        if today < next_due <= window_end:
            due.append(rental)
    return due


def send_reminder(db: Session, rental: Rental, due: Optional[date] = None) -> Tuple[Notification, Notification]:
    """Notify the tenant that rent is due and tell the owner the reminder went out."""
    prop = rental.property
    due_text = f" is due on {due.isoformat()}" if due else " is due soon"
    tenant_notification = create_notification(
        db,
        user_id=rental.tenant_id,
        message=f"Reminder: Your rent payment for {prop.title}{due_text}. Amount: PKR {prop.amount}",
        type=RENT_REMINDER,
    )
    owner_notification = create_notification(
        db,
        user_id=prop.owner_id,
        message=f"Rent payment reminder sent to {rental.tenant.name} for property: {prop.title}",
        type=RENT_REMINDER_SENT,
    )
    db.commit()
    db.refresh(tenant_notification)
    db.refresh(owner_notification)
    return tenant_notification, owner_notification


def _reminded_since(db: Session, tenant_id: str, since: datetime) -> bool:
    return (
        db.query(Notification.id)
        .filter(
            Notification.user_id == tenant_id,
            Notification.type == RENT_REMINDER,
            Notification.created_at >= since,
        )
        .first()
        is not None
    )


def run_auto_reminders(db: Session, *, today: date) -> List[dict]:
    """
    Send reminders for every ACTIVE rental whose reminder date is today.

    At most one reminder per tenant per day. Each rental is handled on its
    own: one failing does not stop the sweep.
    """
    day_start = datetime.combine(today, time.min, tzinfo=timezone.utc)
    sent = []
    for rental in _active_rentals(db):
        due = next_payment_date(rental.start_date, today)
        if reminder_date_for(due) != today:
            continue
        if _reminded_since(db, rental.tenant_id, day_start):
            continue
        try:
            send_reminder(db, rental, due)
        except Exception:
            db.rollback()
            logger.exception("Failed to send automatic reminder for rental %s", rental.id)
            continue
        sent.append(_detail(rental, due))

    logger.info("Automatic reminder sweep for %s sent %d reminder(s)", today.isoformat(), len(sent))
    return sent


def upcoming_reminders(db: Session, *, today: date) -> List[dict]:
    """Reminders that will go out within the lead window, without sending them."""
    window_end = today + timedelta(days=settings.REMINDER_LEAD_DAYS)
    upcoming = []
    for rental in _active_rentals(db):
        due = next_payment_date(rental.start_date, today)
        if today <= reminder_date_for(due) <= window_end:
            upcoming.append(_detail(rental, due))
    return upcoming
