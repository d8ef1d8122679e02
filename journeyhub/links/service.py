"""
Public link lifecycle: NoLink -> Active -> (Consumed | RevokedByOwner).

Both end states are stored as is_revoked = true and are terminal. The
active -> revoked transition is a conditional UPDATE, so of two concurrent
consumers exactly one wins and the other sees Gone.
"""
import uuid
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journeyhub.audit import repo as audit_repo
from journeyhub.audit.models import AuditLog, REVOKE_PUBLIC_LINK
from journeyhub.core import exceptions as exc
from journeyhub.core.config import PUBLIC_LINK_PREFIX
from journeyhub.core.timeutil import utcnow
from journeyhub.journeys import repo as journeys_repo
from journeyhub.journeys.models import Journey
from journeyhub.links import repo
from journeyhub.links.models import JourneyPublicLink


@dataclass
class PublicLink:
    token: str
    url: str


def public_url(token: str) -> str:
    return f"{PUBLIC_LINK_PREFIX}/{token}"


def _to_public_link(link: JourneyPublicLink) -> PublicLink:
    return PublicLink(token=link.token, url=public_url(link.token))


def create_public_link(db: Session, journey_id: str) -> PublicLink:
    """Return the journey's active link, creating one if there is none."""
    if journeys_repo.get_journey(db, journey_id) is None:
        raise exc.NotFoundError(exc.JOURNEY_NOT_FOUND)

    existing = repo.find_active_by_journey(db, journey_id)
    if existing is not None:
        return _to_public_link(existing)

    link = JourneyPublicLink(
        journey_id=journey_id,
        token=str(uuid.uuid4()),
        created_at=utcnow(),
        is_revoked=False,
    )
    try:
        repo.add_link(db, link)
    except IntegrityError:
        # A concurrent request created the active link first
        db.rollback()
        existing = repo.find_active_by_journey(db, journey_id)
        if existing is None:
            raise
        return _to_public_link(existing)

    print(f"[PUBLIC-LINK] created link={link.id} journey={journey_id}", flush=True)
    return _to_public_link(link)


def consume_public_link(db: Session, token: str) -> Journey:
    """Resolve a token to its journey. Succeeds at most once per link."""
    link = repo.find_by_token(db, token)
    if link is None:
        raise exc.NotFoundError(exc.PUBLIC_LINK_NOT_FOUND)

    journey = journeys_repo.get_journey(db, link.journey_id)
    if journey is None:
        raise exc.NotFoundError(exc.JOURNEY_NOT_FOUND)

    if link.is_revoked or not repo.mark_revoked_if_active(db, link):
        raise exc.GoneError(exc.PUBLIC_LINK_REVOKED)

    print(f"[PUBLIC-LINK] consumed link={link.id} journey={journey.id}", flush=True)
    return journey


def revoke_public_link(db: Session, journey_id: str, acting_user_id: str) -> None:
    """
    Owner-initiated revocation. Ownership is checked by the caller, not here.
    """
    if journeys_repo.get_journey(db, journey_id) is None:
        raise exc.NotFoundError(exc.JOURNEY_NOT_FOUND)

    link = repo.find_latest_by_journey(db, journey_id)
    if link is None:
        raise exc.NotFoundError(exc.PUBLIC_LINK_NOT_FOUND)

    if link.is_revoked or not repo.mark_revoked_if_active(db, link, stamp=True):
        raise exc.GoneError(exc.PUBLIC_LINK_REVOKED)

    audit_repo.add_entry(
        db,
        AuditLog(
            user_id=acting_user_id,
            target_id=link.id,
            action_type=REVOKE_PUBLIC_LINK,
            timestamp=utcnow(),
            description=f"User {acting_user_id} revoked the public link for journey {journey_id}.",
        ),
    )
    print(f"[PUBLIC-LINK] revoked link={link.id} journey={journey_id} by={acting_user_id}", flush=True)
