from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional


class PaymentCreate(BaseModel):
    property_id: str = Field(..., min_length=1, alias="propertyId")
    method: Literal["card", "jazzcash", "easypaisa"] = Field(..., alias="paymentMethod")
    amount: Optional[Decimal] = Field(None, gt=0)  # defaults to the property's rent

    class Config:
        populate_by_name = True


class PaymentOut(BaseModel):
    id: str
    rental_id: str
    property_id: str
    tenant_id: str
    period_start: date
    amount: Decimal
    method: str
    status: str
    paid_at: datetime

    class Config:
        from_attributes = True
