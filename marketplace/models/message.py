import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from marketplace.core.database import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    property = relationship("Property")

    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    sender = relationship("User", foreign_keys=[sender_id])

    receiver_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    receiver = relationship("User", foreign_keys=[receiver_id])

    content = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
