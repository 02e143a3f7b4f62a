from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional
from decimal import Decimal

from marketplace.api.deps import get_db
from marketplace.core.auth import CurrentUser, get_current_user
from marketplace.core.errors import NotFoundError
from marketplace.models.property import Property
from marketplace.schemas.property import PropertyListingOut, PropertyOut

router = APIRouter(prefix="/properties", tags=["properties"])


def apply_property_filters(
    q,
    type: Optional[str],
    min_amount: Optional[Decimal],
    max_amount: Optional[Decimal],
    search: Optional[str],
):
    if type:
        q = q.filter(Property.type == type)

    if min_amount is not None:
        q = q.filter(Property.amount >= min_amount)
    if max_amount is not None:
        q = q.filter(Property.amount <= max_amount)

    # basic search: title/location/description
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(
            Property.title.ilike(like)
            | Property.location.ilike(like)
            | Property.description.ilike(like)
        )

    return q


@router.get("", response_model=List[PropertyListingOut])
def list_available_properties(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    type: Optional[str] = Query(None, description="house|apartment|room|..."),
    min_amount: Optional[Decimal] = Query(None, ge=0),
    max_amount: Optional[Decimal] = Query(None, ge=0),
    search: Optional[str] = Query(None, description="search by title/location/description"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """
    Properties open for rent, newest first, with images and owner contact.
    """
    q = (
        db.query(Property)
        .options(selectinload(Property.images), selectinload(Property.owner))
        .filter(Property.is_available == True)
    )
    q = apply_property_filters(q, type, min_amount, max_amount, search)

    return q.order_by(Property.created_at.desc()).offset(offset).limit(limit).all()


@router.get("/{property_id}", response_model=PropertyOut)
def get_property(property_id: str, db: Session = Depends(get_db)):
    prop = (
        db.query(Property)
        .options(selectinload(Property.images))
        .filter(Property.id == property_id)
        .first()
    )
    if not prop:
        raise NotFoundError("Property not found")
    return prop
