import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean
from sqlalchemy.sql import func
from marketplace.core.database import Base

MESSAGE = "MESSAGE"
RENTAL_CREATED = "RENTAL_CREATED"
RENTAL_CANCELLED = "RENTAL_CANCELLED"
RENT_REMINDER = "RENT_REMINDER"
RENT_REMINDER_SENT = "RENT_REMINDER_SENT"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    message = Column(String, nullable=False)
    type = Column(String, nullable=False, index=True)
    is_read = Column(Boolean, nullable=False, default=False)

    # set client-side too: the daily reminder sweep compares against it
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
