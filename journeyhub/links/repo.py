from typing import List, Optional

from sqlalchemy.orm import Session

from journeyhub.core.timeutil import utcnow
from journeyhub.links.models import JourneyPublicLink


def add_link(db: Session, link: JourneyPublicLink) -> str:
    db.add(link)
    db.commit()
    db.refresh(link)
    return link.id


def find_active_by_journey(db: Session, journey_id: str) -> Optional[JourneyPublicLink]:
    return (
        db.query(JourneyPublicLink)
        .filter(
            JourneyPublicLink.journey_id == journey_id,
            JourneyPublicLink.is_revoked.is_(False),
        )
        .first()
    )


def find_latest_by_journey(db: Session, journey_id: str) -> Optional[JourneyPublicLink]:
    """Active link if there is one, otherwise the most recently created."""
    active = find_active_by_journey(db, journey_id)
    if active:
        return active
    return (
        db.query(JourneyPublicLink)
        .filter(JourneyPublicLink.journey_id == journey_id)
        .order_by(JourneyPublicLink.created_at.desc(), JourneyPublicLink.id.desc())
        .first()
    )


def find_by_token(db: Session, token: str) -> Optional[JourneyPublicLink]:
    return db.query(JourneyPublicLink).filter(JourneyPublicLink.token == token).first()


def mark_revoked_if_active(db: Session, link: JourneyPublicLink, stamp: bool = False) -> bool:
    """
    Compare-and-swap on the revoked flag.

    Returns True only for the caller whose UPDATE flipped is_revoked from
    false to true; a concurrent consumer or revoker gets False.
    """
    values = {JourneyPublicLink.is_revoked: True}
    if stamp:
        values[JourneyPublicLink.revoked_at] = utcnow()

    updated = (
        db.query(JourneyPublicLink)
        .filter(
            JourneyPublicLink.id == link.id,
            JourneyPublicLink.is_revoked.is_(False),
        )
        .update(values, synchronize_session=False)
    )
    db.commit()
    db.refresh(link)
    return updated == 1


def delete_all(db: Session, links: List[JourneyPublicLink]) -> None:
    for link in links:
        db.delete(link)
    db.commit()
