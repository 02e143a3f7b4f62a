import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean, Numeric, Float
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.core.database import Base


class Property(Base):
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    owner = relationship("User")

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    type = Column(String, nullable=False)          # house / apartment / room / ...
    area = Column(Float, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)  # monthly rent
    location = Column(String, nullable=False)

    # False while an ACTIVE rental exists; only the rental lifecycle flips it
    is_available = Column(Boolean, nullable=False, default=True)

    images = relationship("Image", back_populates="property", order_by="Image.created_at")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
