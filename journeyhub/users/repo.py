from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from journeyhub.users.models import User


def add_user(db: Session, user: User) -> str:
    db.add(user)
    db.commit()
    db.refresh(user)
    return user.id


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def find_by_email_or_username(db: Session, email: str, username: str) -> Optional[User]:
    return db.query(User).filter(or_(User.email == email, User.username == username)).first()
