from pydantic import BaseModel, Field
from datetime import datetime


class MessageCreate(BaseModel):
    property_id: str = Field(..., min_length=1, alias="propertyId")
    receiver_id: str = Field(..., min_length=1, alias="receiverId")
    message: str = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class MessageUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class ParticipantOut(BaseModel):
    id: str
    name: str
    email: str
    phone_number: str

    class Config:
        from_attributes = True


class MessagePropertyOut(BaseModel):
    id: str
    title: str
    location: str

    class Config:
        from_attributes = True


class MessageOut(BaseModel):
    id: str
    content: str
    sender: ParticipantOut
    receiver: ParticipantOut
    property: MessagePropertyOut
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
