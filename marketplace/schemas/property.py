from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class PropertyBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: str = Field(..., min_length=1)  # house / apartment / room / ...
    area: float = Field(..., gt=0)
    amount: Decimal = Field(..., gt=0)  # monthly rent
    location: str = Field(..., min_length=1)

    @field_validator('title', 'type', 'location', mode='before')
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    # is_available is deliberately absent: only renting/unrenting changes it
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    type: Optional[str] = Field(None, min_length=1)
    area: Optional[float] = Field(None, gt=0)
    amount: Optional[Decimal] = Field(None, gt=0)
    location: Optional[str] = Field(None, min_length=1)

    # omitted means unchanged; explicit null is refused for NOT NULL columns
    @field_validator('title', 'type', 'area', 'amount', 'location', mode='before')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        if isinstance(v, str):
            return v.strip()
        return v


class ImageCreate(BaseModel):
    url: str = Field(..., min_length=1)

    @field_validator('url')
    @classmethod
    def must_be_http_url(cls, v):
        v = v.strip()
        if not (v.startswith("https://") or v.startswith("http://")):
            raise ValueError("url must be an http(s) URL")
        return v


class ImageOut(BaseModel):
    id: str
    url: str

    class Config:
        from_attributes = True


class OwnerContactOut(BaseModel):
    id: str
    name: str
    email: str
    phone_number: str

    class Config:
        from_attributes = True


class PropertyOut(PropertyBase):
    id: str
    owner_id: str
    is_available: bool
    images: List[ImageOut] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PropertyListingOut(PropertyOut):
    owner: OwnerContactOut


class PropertySummaryOut(BaseModel):
    """Card shown in the tenant's rented / favourite lists."""
    id: str
    title: str
    location: str
    amount: Decimal
    images: List[ImageOut] = []

    class Config:
        from_attributes = True
