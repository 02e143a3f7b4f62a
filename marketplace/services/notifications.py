import logging

from sqlalchemy.orm import Session

from marketplace.models.notification import Notification

logger = logging.getLogger(__name__)


def create_notification(db: Session, *, user_id: str, message: str, type: str) -> Notification:
    """Add a notification to the session; the caller commits."""
    notification = Notification(user_id=user_id, message=message, type=type, is_read=False)
    db.add(notification)
    return notification


def notify(db: Session, *, user_id: str, message: str, type: str) -> None:
    """
    Best-effort notification, committed on its own.

    Runs after the primary write has committed. A failure here is logged and
    rolled back, and never changes the outcome reported to the caller.
    """
    try:
        create_notification(db, user_id=user_id, message=message, type=type)
        db.commit()
        logger.info("Notification %s sent to user %s", type, user_id)
    except Exception:
        db.rollback()
        logger.exception("Failed to send %s notification to user %s", type, user_id)
