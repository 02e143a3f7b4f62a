import uuid

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.core.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    rental_id = Column(String(36), ForeignKey("rentals.id"), nullable=False, index=True)
    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    tenant_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # First day of the month this payment belongs to (ex: 2026-02-01)
    period_start = Column(Date, nullable=False, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(String, nullable=False)  # card / jazzcash / easypaisa
    status = Column(String, nullable=False, default="paid")

    paid_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    rental = relationship("Rental")
    property = relationship("Property")
