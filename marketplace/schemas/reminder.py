from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List

from marketplace.schemas.notification import NotificationOut
from marketplace.schemas.rental import RentalOut


class ReminderRequest(BaseModel):
    rental_id: str = Field(..., min_length=1, alias="rentalId")

    class Config:
        populate_by_name = True


class ReminderSentOut(BaseModel):
    message: str
    tenant_notification: NotificationOut
    owner_notification: NotificationOut


class DueRentalsOut(BaseModel):
    reminders_needed: int
    rentals: List[RentalOut]


class ReminderDetail(BaseModel):
    rental_id: str
    property_title: str
    tenant_name: str
    owner_name: str
    reminder_date: date
    due_date: date
    amount: Decimal


class AutoRemindersOut(BaseModel):
    message: str
    reminders_sent: int
    details: List[ReminderDetail]


class UpcomingRemindersOut(BaseModel):
    upcoming_reminders: int
    details: List[ReminderDetail]
