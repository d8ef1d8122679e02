import uuid

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index, false
from sqlalchemy.orm import relationship

from journeyhub.core.timeutil import utcnow
from journeyhub.db.base import Base


class JourneyPublicLink(Base):
    """
    Single-use public token for one journey.

    Active -> revoked happens either when the token is consumed or when the
    owner revokes it. Revoked is terminal.
    """

    __tablename__ = "journey_public_links"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    journey_id = Column(
        String(36),
        ForeignKey("journeys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token = Column(String(64), nullable=False, unique=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    is_revoked = Column(Boolean, nullable=False, default=False)
    revoked_at = Column(DateTime, nullable=True)

    journey = relationship("Journey", back_populates="public_links")

    # At most one active link per journey
    __table_args__ = (
        Index(
            "uq_public_link_active_journey",
            "journey_id",
            unique=True,
            sqlite_where=is_revoked == false(),
            postgresql_where=is_revoked == false(),
        ),
    )
