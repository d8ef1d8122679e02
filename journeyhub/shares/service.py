"""
Journey sharing with per-recipient de-duplication.

Each recipient is committed on its own together with its audit entry. A
failure halfway leaves earlier recipients shared; calling again is safe
because already-shared recipients are skipped.
"""
from dataclasses import dataclass, field
from typing import Iterable, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journeyhub.audit import repo as audit_repo
from journeyhub.audit.models import AuditLog, SHARE_JOURNEY
from journeyhub.core import exceptions as exc
from journeyhub.core.timeutil import utcnow
from journeyhub.journeys import repo as journeys_repo
from journeyhub.shares import repo
from journeyhub.shares.models import JourneyShare


@dataclass
class ShareResult:
    created_share_ids: List[str] = field(default_factory=list)
    shared_with_user_ids: List[str] = field(default_factory=list)


def _share_with(db: Session, journey_id: str, acting_user_id: str, recipient_id: str):
    """Insert one share plus its audit row. Returns None if already shared."""
    if repo.find_active(db, journey_id, recipient_id) is not None:
        return None

    now = utcnow()
    share = JourneyShare(
        journey_id=journey_id,
        shared_by_user_id=acting_user_id,
        receiving_user_id=recipient_id,
        shared_at=now,
        is_revoked=False,
    )
    try:
        repo.add_share(db, share, commit=False)
        audit_repo.add_entry(
            db,
            AuditLog(
                user_id=acting_user_id,
                target_id=share.id,
                action_type=SHARE_JOURNEY,
                timestamp=now,
                description=f"User {acting_user_id} shared journey {journey_id} with user {recipient_id}.",
            ),
            commit=False,
        )
        db.commit()
    except IntegrityError:
        # Active share appeared between the check and the insert
        db.rollback()
        return None
    return share


def share_journey(
    db: Session, journey_id: str, acting_user_id: str, recipient_ids: Iterable[str]
) -> ShareResult:
    if journeys_repo.get_journey(db, journey_id) is None:
        raise exc.NotFoundError(exc.JOURNEY_NOT_FOUND)

    result = ShareResult()
    for recipient_id in recipient_ids:
        share = _share_with(db, journey_id, acting_user_id, recipient_id)
        if share is None:
            print(f"[SHARE] skip journey={journey_id} recipient={recipient_id} (already shared)", flush=True)
            continue
        result.created_share_ids.append(share.id)
        result.shared_with_user_ids.append(recipient_id)

    if result.created_share_ids:
        print(
            f"[SHARE] journey={journey_id} by={acting_user_id} "
            f"new_recipients={len(result.created_share_ids)}",
            flush=True,
        )
    return result
