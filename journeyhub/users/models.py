import uuid

from sqlalchemy import Column, String, DateTime

from journeyhub.core.timeutil import utcnow
from journeyhub.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
