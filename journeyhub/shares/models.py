import uuid

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index, false
from sqlalchemy.orm import relationship

from journeyhub.core.timeutil import utcnow
from journeyhub.db.base import Base


class JourneyShare(Base):
    __tablename__ = "journey_shares"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    journey_id = Column(
        String(36),
        ForeignKey("journeys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    shared_by_user_id = Column(String(36), nullable=False)
    receiving_user_id = Column(String(36), nullable=False, index=True)

    shared_at = Column(DateTime, default=utcnow, nullable=False)
    is_revoked = Column(Boolean, nullable=False, default=False)

    journey = relationship("Journey", back_populates="shares")

    # At most one active share per (journey, recipient)
    __table_args__ = (
        Index(
            "uq_share_active_recipient",
            "journey_id",
            "receiving_user_id",
            unique=True,
            sqlite_where=is_revoked == false(),
            postgresql_where=is_revoked == false(),
        ),
    )
