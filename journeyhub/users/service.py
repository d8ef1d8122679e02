from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journeyhub.badges import repo as badges_repo
from journeyhub.badges.models import DailyGoalBadge
from journeyhub.core import exceptions as exc
from journeyhub.users import repo
from journeyhub.users.models import User


def create_user(db: Session, email: str, username: str) -> User:
    email = email.strip().lower()
    username = username.strip()
    if repo.find_by_email_or_username(db, email, username) is not None:
        raise exc.ConflictError(exc.USER_ALREADY_EXISTS)

    user = User(email=email, username=username)
    try:
        repo.add_user(db, user)
    except IntegrityError:
        db.rollback()
        raise exc.ConflictError(exc.USER_ALREADY_EXISTS)
    return user


def get_user(db: Session, user_id: str) -> User:
    user = repo.get_user(db, user_id)
    if user is None:
        raise exc.NotFoundError(exc.USER_NOT_FOUND)
    return user


def list_badges(db: Session, user_id: str) -> List[DailyGoalBadge]:
    get_user(db, user_id)
    return badges_repo.list_for_user(db, user_id)
