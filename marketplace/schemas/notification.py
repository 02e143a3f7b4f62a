from pydantic import BaseModel, Field
from datetime import datetime


class NotificationCreate(BaseModel):
    recipient_id: str = Field(..., min_length=1, alias="recipientId")
    message: str = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class MarkReadRequest(BaseModel):
    notification_id: str = Field(..., min_length=1, alias="notificationId")

    class Config:
        populate_by_name = True


class NotificationOut(BaseModel):
    id: str
    user_id: str
    message: str
    type: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MarkReadOut(BaseModel):
    message: str
    notification: NotificationOut


class MarkAllReadOut(BaseModel):
    message: str
    updated_count: int
