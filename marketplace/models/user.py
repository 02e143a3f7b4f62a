import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from marketplace.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)

    # TENANT / OWNER, fixed at registration
    role = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
