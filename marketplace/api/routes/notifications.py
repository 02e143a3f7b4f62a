from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from marketplace.api.deps import get_db
from marketplace.core.auth import CurrentUser, get_current_user
from marketplace.core.errors import NotFoundError, UnauthorizedError
from marketplace.models.notification import MESSAGE, Notification
from marketplace.models.user import User
from marketplace.schemas.notification import (
    MarkAllReadOut,
    MarkReadOut,
    MarkReadRequest,
    NotificationCreate,
    NotificationOut,
)
from marketplace.services.notifications import create_notification

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("", response_model=NotificationOut)
def notify_user(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    if not db.query(User.id).filter(User.id == payload.recipient_id).first():
        raise NotFoundError("Recipient not found")

    notification = create_notification(
        db, user_id=payload.recipient_id, message=payload.message, type=MESSAGE
    )
    db.commit()
    db.refresh(notification)
    return notification


@router.get("", response_model=List[NotificationOut])
def list_unread(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id, Notification.is_read == False)
        .order_by(Notification.created_at.desc())
        .all()
    )


@router.post("/mark-read", response_model=MarkReadOut)
def mark_read(
    payload: MarkReadRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    notification = db.query(Notification).filter(Notification.id == payload.notification_id).first()
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.user_id != current_user.id:
        raise UnauthorizedError("Unauthorized")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return {"message": "Notification marked as read", "notification": notification}


@router.post("/mark-all-read", response_model=MarkAllReadOut)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id, Notification.is_read == False)
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return {"message": "All notifications marked as read", "updated_count": updated}
