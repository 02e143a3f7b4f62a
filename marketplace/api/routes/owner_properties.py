import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session, selectinload
from typing import List

from marketplace.api.deps import get_db
from marketplace.core.auth import OWNER, CurrentUser, require_role
from marketplace.models.property import Property
from marketplace.schemas.property import ImageCreate, ImageOut, PropertyCreate, PropertyOut, PropertyUpdate
from marketplace.services import properties as property_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/owner/properties", tags=["owner"])


@router.get("", response_model=List[PropertyOut])
def list_my_properties(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(OWNER)),
):
    return (
        db.query(Property)
        .options(selectinload(Property.images))
        .filter(Property.owner_id == current_user.id)
        .order_by(Property.created_at.desc())
        .all()
    )


@router.post("", response_model=PropertyOut, status_code=201)
def create_property(
    payload: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(OWNER)),
):
    prop = Property(**payload.model_dump(), owner_id=current_user.id, is_available=True)
    db.add(prop)
    db.commit()
    db.refresh(prop)
    logger.info("Property %s listed by owner %s", prop.id, current_user.id)
    return prop


@router.get("/{property_id}", response_model=PropertyOut)
def get_my_property(
    property_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(OWNER)),
):
    return property_service.get_owned_property(db, property_id=property_id, owner_id=current_user.id)


@router.patch("/{property_id}", response_model=PropertyOut)
def update_my_property(
    property_id: str,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(OWNER)),
):
    prop = property_service.get_owned_property(db, property_id=property_id, owner_id=current_user.id)

    data = payload.model_dump(exclude_unset=True)
    for k, v in data.items():
        setattr(prop, k, v)

    db.commit()
    db.refresh(prop)
    return prop


@router.delete("/{property_id}")
def delete_my_property(
    property_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(OWNER)),
):
    """
    Delete a property with its images, favorites, messages, payments and
    (cancelled) rentals. Refused while an ACTIVE rental exists.
    """
    property_service.delete_property(db, property_id=property_id, owner_id=current_user.id)
    return {"message": "Property deleted successfully", "property_id": property_id}


@router.post("/{property_id}/images", response_model=ImageOut, status_code=201)
def add_property_image(
    property_id: str,
    payload: ImageCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(OWNER)),
):
    return property_service.add_image(
        db, property_id=property_id, owner_id=current_user.id, url=payload.url
    )


@router.delete("/images/{image_id}", status_code=204)
def delete_property_image(
    image_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role(OWNER)),
):
    property_service.delete_image(db, image_id=image_id, owner_id=current_user.id)
    return Response(status_code=204)
