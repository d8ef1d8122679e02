import uuid

from sqlalchemy import Column, String, DateTime, Boolean, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from journeyhub.db.base import Base


class Journey(Base):
    """
    A recorded trip belonging to a user.

    - start_time / arrival_time are naive UTC
    - is_daily_goal_achieved is set once, by the daily goal worker, on the
      journey that pushed the user's same-day total past the threshold
    - public links and shares are deleted together with the journey
    """

    __tablename__ = "journeys"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    starting_location = Column(String, nullable=False, default="")
    arrival_location = Column(String, nullable=False, default="")

    start_time = Column(DateTime, nullable=False, index=True)
    arrival_time = Column(DateTime, nullable=False)

    # Free text: "car", "bus", "bike", ...
    transportation_type = Column(String(64), nullable=False, default="")

    route_distance_km = Column(Numeric(10, 2), nullable=False, default=0)

    is_daily_goal_achieved = Column(Boolean, nullable=False, default=False)

    public_links = relationship(
        "JourneyPublicLink",
        back_populates="journey",
        cascade="all, delete-orphan",
    )
    shares = relationship(
        "JourneyShare",
        back_populates="journey",
        cascade="all, delete-orphan",
    )

    # One journey per user per start time
    __table_args__ = (
        UniqueConstraint("user_id", "start_time", name="uq_journey_user_start"),
    )
