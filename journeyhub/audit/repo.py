from typing import List

from sqlalchemy.orm import Session

from journeyhub.audit.models import AuditLog


def add_entry(db: Session, entry: AuditLog, commit: bool = True) -> str:
    """Append an audit row. Pass commit=False to join the caller's transaction."""
    db.add(entry)
    if commit:
        db.commit()
    return entry.id


def list_for_target(db: Session, target_id: str) -> List[AuditLog]:
    return (
        db.query(AuditLog)
        .filter(AuditLog.target_id == target_id)
        .order_by(AuditLog.timestamp.asc())
        .all()
    )
