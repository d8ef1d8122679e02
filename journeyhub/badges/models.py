import uuid

from sqlalchemy import Column, String, Date, Numeric, UniqueConstraint

from journeyhub.db.base import Base


class DailyGoalBadge(Base):
    __tablename__ = "daily_goal_badges"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)

    # UTC calendar day the goal was reached
    date = Column(Date, nullable=False)

    # Running total at the journey that crossed the threshold
    total_distance_km = Column(Numeric(10, 2), nullable=False)

    # One badge per user per day
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_goal_badge"),
    )
