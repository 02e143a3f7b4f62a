import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketplace.core.config import settings
from marketplace.core.errors import ConflictError, NotFoundError, TransactionError, UnauthorizedError, ValidationError
from marketplace.models.favorite import Favorite
from marketplace.models.image import Image
from marketplace.models.message import Message
from marketplace.models.payment import Payment
from marketplace.models.property import Property
from marketplace.models.rental import ACTIVE, Rental

logger = logging.getLogger(__name__)


def get_owned_property(db: Session, *, property_id: str, owner_id: str, lock: bool = False) -> Property:
    q = db.query(Property).filter(Property.id == property_id)
    if lock:
        q = q.with_for_update()
    prop = q.first()
    if not prop:
        raise NotFoundError("Property not found")
    if prop.owner_id != owner_id:
        raise UnauthorizedError("You do not own this property")
    return prop


def delete_property(db: Session, *, property_id: str, owner_id: str) -> None:
    """
    Delete a property and everything that references it.

    Refused while the property has an ACTIVE rental. The property row is
    locked first so a rental cannot slip in between the check and the delete.
    """
    get_owned_property(db, property_id=property_id, owner_id=owner_id, lock=True)

    active = (
        db.query(Rental.id)
        .filter(Rental.property_id == property_id, Rental.status == ACTIVE)
        .first()
    )
    if active:
        raise ConflictError(
            "Cannot delete property with active rentals. Please cancel all active rentals first."
        )

    try:
        # Delete in dependency order (children before parents due to FKs)
        db.query(Image).filter(Image.property_id == property_id).delete(synchronize_session=False)
        db.query(Favorite).filter(Favorite.property_id == property_id).delete(synchronize_session=False)
        db.query(Message).filter(Message.property_id == property_id).delete(synchronize_session=False)
        db.query(Payment).filter(Payment.property_id == property_id).delete(synchronize_session=False)
        db.query(Rental).filter(Rental.property_id == property_id).delete(synchronize_session=False)
        db.query(Property).filter(Property.id == property_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to delete property %s", property_id)
        raise TransactionError("Failed to delete property") from e

    db.expunge_all()
    logger.info("Property %s deleted by owner %s", property_id, owner_id)


def add_image(db: Session, *, property_id: str, owner_id: str, url: str) -> Image:
    prop = get_owned_property(db, property_id=property_id, owner_id=owner_id, lock=True)

    count = db.query(Image).filter(Image.property_id == prop.id).count()
    if count >= settings.MAX_IMAGES_PER_PROPERTY:
        raise ValidationError(
            f"Maximum {settings.MAX_IMAGES_PER_PROPERTY} images allowed per property"
        )

    image = Image(property_id=prop.id, url=url)
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


def delete_image(db: Session, *, image_id: str, owner_id: str) -> None:
    image = db.query(Image).filter(Image.id == image_id).first()
    if not image:
        raise NotFoundError("Image not found")
    if image.property.owner_id != owner_id:
        raise UnauthorizedError("You do not own this property")

    db.delete(image)
    db.commit()
