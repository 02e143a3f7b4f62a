from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional


class RentalCreate(BaseModel):
    property_id: str = Field(..., min_length=1, alias="propertyId")
    start_date: date = Field(..., alias="startDate")  # ISO date, e.g. "2025-01-01"

    class Config:
        populate_by_name = True


class RentalOut(BaseModel):
    id: str
    property_id: str
    tenant_id: str
    status: str  # ACTIVE / CANCELLED
    start_date: date
    end_date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RentalCreatedOut(BaseModel):
    message: str
    rental: RentalOut


class RentalCancelledOut(BaseModel):
    message: str
    rental_id: str
    property_id: str
