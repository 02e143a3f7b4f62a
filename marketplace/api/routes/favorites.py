from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from typing import List

from marketplace.api.deps import get_db
from marketplace.core.auth import CurrentUser, get_current_user
from marketplace.core.errors import ConflictError, NotFoundError
from marketplace.models.favorite import Favorite
from marketplace.models.property import Property
from marketplace.schemas.favorite import FavoriteCreate, FavoriteOut
from marketplace.schemas.property import PropertySummaryOut

router = APIRouter(tags=["favorites"])

ALREADY_FAVORITED = "Property already in favorites"


@router.post("/favorites", response_model=FavoriteOut)
def add_favorite(
    payload: FavoriteCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    prop = db.query(Property.id).filter(Property.id == payload.property_id).first()
    if not prop:
        raise NotFoundError("Property not found")

    existing = (
        db.query(Favorite.id)
        .filter(Favorite.user_id == current_user.id, Favorite.property_id == payload.property_id)
        .first()
    )
    if existing:
        raise ConflictError(ALREADY_FAVORITED)

    favorite = Favorite(user_id=current_user.id, property_id=payload.property_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(ALREADY_FAVORITED)
    db.refresh(favorite)
    return favorite


@router.delete("/favorites/{property_id}")
def remove_favorite(
    property_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    favorite = (
        db.query(Favorite)
        .filter(Favorite.property_id == property_id, Favorite.user_id == current_user.id)
        .first()
    )
    if not favorite:
        raise NotFoundError("Favorite not found")

    db.delete(favorite)
    db.commit()
    return {"message": "Favorite removed successfully"}


@router.get("/tenant/favorites", response_model=List[PropertySummaryOut])
def list_favorite_properties(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    favorites = (
        db.query(Favorite)
        .options(selectinload(Favorite.property).selectinload(Property.images))
        .filter(Favorite.user_id == current_user.id)
        .order_by(Favorite.created_at.desc())
        .all()
    )
    return [favorite.property for favorite in favorites]
