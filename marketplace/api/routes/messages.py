from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from typing import List

from marketplace.api.deps import get_db
from marketplace.core.auth import CurrentUser, get_current_user
from marketplace.core.errors import NotFoundError, UnauthorizedError
from marketplace.models.message import Message
from marketplace.models.property import Property
from marketplace.models.user import User
from marketplace.schemas.message import MessageCreate, MessageOut, MessageUpdate

router = APIRouter(prefix="/messages", tags=["messages"])


def _get_message(db: Session, message_id: str) -> Message:
    message = db.query(Message).filter(Message.id == message_id).first()
    if not message:
        raise NotFoundError("Message not found")
    return message


@router.post("", response_model=MessageOut)
def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    if not db.query(Property.id).filter(Property.id == payload.property_id).first():
        raise NotFoundError("Property not found")
    if not db.query(User.id).filter(User.id == payload.receiver_id).first():
        raise NotFoundError("Receiver not found")

    message = Message(
        property_id=payload.property_id,
        sender_id=current_user.id,
        receiver_id=payload.receiver_id,
        content=payload.message,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


@router.get("", response_model=List[MessageOut])
def list_messages(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Messages the caller sent or received, newest first.
    """
    return (
        db.query(Message)
        .options(
            selectinload(Message.sender),
            selectinload(Message.receiver),
            selectinload(Message.property),
        )
        .filter(or_(Message.sender_id == current_user.id, Message.receiver_id == current_user.id))
        .order_by(Message.created_at.desc())
        .all()
    )


@router.patch("/{message_id}", response_model=MessageOut)
def edit_message(
    message_id: str,
    payload: MessageUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    message = _get_message(db, message_id)

    # Only the sender may edit
    if message.sender_id != current_user.id:
        raise UnauthorizedError("Unauthorized")

    message.content = payload.content
    db.commit()
    db.refresh(message)
    return message


@router.delete("/{message_id}")
def delete_message(
    message_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    message = _get_message(db, message_id)

    # Sender and receiver may both delete
    if current_user.id not in (message.sender_id, message.receiver_id):
        raise UnauthorizedError("Unauthorized")

    db.delete(message)
    db.commit()
    return {"message": "Message deleted successfully"}
