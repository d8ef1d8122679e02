from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from journeyhub.db.session import get_db
from journeyhub.users import service
from journeyhub.users.schemas import CreateUserRequest

router = APIRouter(prefix="/api/users", tags=["users"])


def _user_to_dict(user) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


@router.post("")
def create_user(request: CreateUserRequest, db: Session = Depends(get_db)):
    user = service.create_user(db, request.email, request.username)
    return _user_to_dict(user)


@router.get("/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    return _user_to_dict(service.get_user(db, user_id))


@router.get("/{user_id}/badges")
def list_user_badges(user_id: str, db: Session = Depends(get_db)):
    """Daily goal badges, newest first."""
    badges = service.list_badges(db, user_id)
    return [
        {
            "id": b.id,
            "date": b.date.isoformat(),
            "total_distance_km": float(b.total_distance_km),
        }
        for b in badges
    ]
