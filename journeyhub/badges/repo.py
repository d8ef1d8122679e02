"""
Daily goal badge storage.

The (user_id, date) unique constraint is the real guard against double
awards; exists_for_user_on_date is only the cheap pre-check.
"""
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journeyhub.badges.models import DailyGoalBadge
from journeyhub.journeys.models import Journey


def exists_for_user_on_date(db: Session, user_id: str, day: date) -> bool:
    return (
        db.query(DailyGoalBadge.id)
        .filter(DailyGoalBadge.user_id == user_id, DailyGoalBadge.date == day)
        .first()
        is not None
    )


def add_badge(db: Session, badge: DailyGoalBadge, journey: Optional[Journey] = None) -> bool:
    """
    Insert the badge if absent. Returns True if newly awarded, False if the
    user already had one for that day.

    When a triggering journey is given, its goal flag is set in the same
    transaction so flag and badge are written together or not at all.
    """
    db.add(badge)
    if journey is not None:
        journey.is_daily_goal_achieved = True
        db.add(journey)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def list_for_user(db: Session, user_id: str) -> List[DailyGoalBadge]:
    return (
        db.query(DailyGoalBadge)
        .filter(DailyGoalBadge.user_id == user_id)
        .order_by(DailyGoalBadge.date.desc())
        .all()
    )
