import uuid

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.core.database import Base

ACTIVE = "ACTIVE"
CANCELLED = "CANCELLED"


class Rental(Base):
    __tablename__ = "rentals"
    __table_args__ = (
        # At most one ACTIVE rental per property, enforced by the database
        Index(
            "uq_rentals_active_property",
            "property_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    property = relationship("Property")

    tenant_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    tenant = relationship("User")

    status = Column(String, nullable=False, default=ACTIVE)  # ACTIVE -> CANCELLED, never back

    start_date = Column(Date, nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)  # set on cancellation

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
