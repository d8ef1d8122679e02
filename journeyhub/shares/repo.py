from typing import List, Optional

from sqlalchemy.orm import Session

from journeyhub.shares.models import JourneyShare


def add_share(db: Session, share: JourneyShare, commit: bool = True) -> str:
    """Insert a share. With commit=False it is only flushed, so the id is set."""
    db.add(share)
    if commit:
        db.commit()
        db.refresh(share)
    else:
        db.flush()
    return share.id


def list_all(db: Session) -> List[JourneyShare]:
    return db.query(JourneyShare).all()


def find_active(db: Session, journey_id: str, receiving_user_id: str) -> Optional[JourneyShare]:
    return (
        db.query(JourneyShare)
        .filter(
            JourneyShare.journey_id == journey_id,
            JourneyShare.receiving_user_id == receiving_user_id,
            JourneyShare.is_revoked.is_(False),
        )
        .first()
    )


def delete_all(db: Session, shares: List[JourneyShare]) -> None:
    for share in shares:
        db.delete(share)
    db.commit()
