from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload
from typing import List

from marketplace.api.deps import get_db
from marketplace.core.auth import TENANT, CurrentUser, require_role
from marketplace.models.property import Property
from marketplace.models.rental import ACTIVE, Rental
from marketplace.schemas.property import PropertySummaryOut
from marketplace.schemas.rental import RentalCancelledOut, RentalCreate, RentalCreatedOut
from marketplace.services import rentals as rental_service

router = APIRouter(prefix="/tenant/rented-properties", tags=["rentals"])


@router.get("", response_model=List[PropertySummaryOut])
def list_rented_properties(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(TENANT)),
):
    """
    The caller's ACTIVE rentals, newest first, as property cards.
    """
    rentals = (
        db.query(Rental)
        .options(selectinload(Rental.property).selectinload(Property.images))
        .filter(Rental.tenant_id == current_user.id, Rental.status == ACTIVE)
        .order_by(Rental.created_at.desc())
        .all()
    )
    return [rental.property for rental in rentals]


@router.post("", response_model=RentalCreatedOut)
def rent_property(
    payload: RentalCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(TENANT)),
):
    rental = rental_service.create_rental(
        db,
        property_id=payload.property_id,
        tenant_id=current_user.id,
        start_date=payload.start_date,
    )
    return {"message": "Property rented successfully", "rental": rental}


@router.delete("/{property_id}", response_model=RentalCancelledOut)
def unrent_property(
    property_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(TENANT)),
):
    rental_id, property_id = rental_service.cancel_rental(
        db, property_id=property_id, tenant_id=current_user.id
    )
    return {
        "message": "Property unrented successfully",
        "rental_id": rental_id,
        "property_id": property_id,
    }
