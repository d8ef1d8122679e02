"""
Append-only audit trail for sensitive actions (link revocation, sharing).

Rows reference their target by id only and are never updated or deleted.
"""
import uuid

from sqlalchemy import Column, String, DateTime, Text

from journeyhub.core.timeutil import utcnow
from journeyhub.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Acting user
    user_id = Column(String(36), nullable=False, index=True)
    # Link id or share id
    target_id = Column(String(36), nullable=False, index=True)

    action_type = Column(String(64), nullable=False)
    timestamp = Column(DateTime, default=utcnow, nullable=False)
    description = Column(Text, default="")


# Action types
REVOKE_PUBLIC_LINK = "RevokePublicLink"
SHARE_JOURNEY = "ShareJourney"
