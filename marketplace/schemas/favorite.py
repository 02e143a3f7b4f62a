from pydantic import BaseModel, Field
from datetime import datetime


class FavoriteCreate(BaseModel):
    property_id: str = Field(..., min_length=1, alias="propertyId")

    class Config:
        populate_by_name = True


class FavoriteOut(BaseModel):
    id: str
    user_id: str
    property_id: str
    created_at: datetime

    class Config:
        from_attributes = True
