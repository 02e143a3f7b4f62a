from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.core.auth import CurrentUser, get_current_user
from marketplace.core.errors import NotFoundError, UnauthorizedError
from marketplace.models.rental import Rental
from marketplace.schemas.reminder import (
    AutoRemindersOut,
    DueRentalsOut,
    ReminderRequest,
    ReminderSentOut,
    UpcomingRemindersOut,
)
from marketplace.services import reminders as reminder_service

router = APIRouter(prefix="/reminders", tags=["reminders"])


def _today():
    return datetime.now(timezone.utc).date()


@router.post("", response_model=ReminderSentOut)
def send_reminder(
    payload: ReminderRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    rental = db.query(Rental).filter(Rental.id == payload.rental_id).first()
    if not rental:
        raise NotFoundError("Rental not found")
    if current_user.id not in (rental.tenant_id, rental.property.owner_id):
        raise UnauthorizedError("Unauthorized")

    tenant_notification, owner_notification = reminder_service.send_reminder(db, rental)
    return {
        "message": "Reminder notifications sent successfully",
        "tenant_notification": tenant_notification,
        "owner_notification": owner_notification,
    }


@router.get("", response_model=DueRentalsOut)
def rentals_needing_reminders(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    rentals = reminder_service.rentals_due_soon(db, user_id=current_user.id, today=_today())
    return {"reminders_needed": len(rentals), "rentals": rentals}


@router.post("/auto", response_model=AutoRemindersOut)
def run_automatic_reminders(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Daily sweep, meant to be called by a scheduler.
    """
    sent = reminder_service.run_auto_reminders(db, today=_today())
    return {
        "message": "Automatic reminders processed successfully",
        "reminders_sent": len(sent),
        "details": sent,
    }


@router.get("/auto", response_model=UpcomingRemindersOut)
def preview_automatic_reminders(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    upcoming = reminder_service.upcoming_reminders(db, today=_today())
    return {"upcoming_reminders": len(upcoming), "details": upcoming}
