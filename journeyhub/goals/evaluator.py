"""
Daily goal evaluation (one cycle).

Rules:
  - Only journeys whose start_time falls on `today` (UTC) count
  - A user already badged for `today` is skipped entirely
  - Journeys are walked in arrival order; the first one whose running total
    reaches the threshold triggers the badge
  - Badge + journey flag are committed together; the event is published
    after the commit
  - Below the threshold nothing is written; a later cycle may still award
"""
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from journeyhub.badges import repo as badges_repo
from journeyhub.badges.models import DailyGoalBadge
from journeyhub.core.config import DAILY_GOAL_THRESHOLD_KM
from journeyhub.events.publisher import DAILY_GOAL_ACHIEVED, EventPublisher
from journeyhub.journeys import repo as journeys_repo
from journeyhub.journeys.models import Journey


@dataclass
class AwardedBadge:
    user_id: str
    journey_id: str
    date: date
    total_distance_km: Decimal


def find_goal_trigger(
    journeys: Iterable[Journey], threshold_km: float = DAILY_GOAL_THRESHOLD_KM
) -> Tuple[Optional[Journey], Decimal]:
    """
    Return (triggering journey, running total at that journey).
    If the threshold is never reached: (None, total of all journeys).
    """
    threshold = Decimal(str(threshold_km))
    running_total = Decimal("0")
    for journey in sorted(journeys, key=lambda j: j.arrival_time):
        running_total += Decimal(journey.route_distance_km or 0)
        if running_total >= threshold:
            return journey, running_total
    return None, running_total


def _group_by_user(journeys: Iterable[Journey]) -> "OrderedDict[str, List[Journey]]":
    grouped: "OrderedDict[str, List[Journey]]" = OrderedDict()
    for journey in journeys:
        grouped.setdefault(journey.user_id, []).append(journey)
    return grouped


def evaluate_daily_goals(
    db: Session,
    today: date,
    publisher: EventPublisher,
    threshold_km: float = DAILY_GOAL_THRESHOLD_KM,
    stop_event: Optional[threading.Event] = None,
) -> List[AwardedBadge]:
    awarded: List[AwardedBadge] = []
    journeys_by_user = _group_by_user(journeys_repo.list_for_date(db, today))

    for user_id, journeys in journeys_by_user.items():
        if stop_event is not None and stop_event.is_set():
            print("[DAILY-GOAL] stop requested, leaving cycle early", flush=True)
            break

        if badges_repo.exists_for_user_on_date(db, user_id, today):
            print(f"[DAILY-GOAL] user={user_id} already has badge for {today}", flush=True)
            continue

        trigger, total = find_goal_trigger(journeys, threshold_km)
        if trigger is None:
            print(f"[DAILY-GOAL] user={user_id} total={total} km, goal not met", flush=True)
            continue

        badge = DailyGoalBadge(user_id=user_id, date=today, total_distance_km=total)
        if not badges_repo.add_badge(db, badge, journey=trigger):
            # Another writer awarded it between the check and the insert
            print(f"[DAILY-GOAL] user={user_id} badge for {today} already recorded", flush=True)
            continue

        publisher.publish(
            DAILY_GOAL_ACHIEVED,
            {"user_id": user_id, "date": today.isoformat()},
            stop_event,
        )
        awarded.append(
            AwardedBadge(user_id=user_id, journey_id=trigger.id, date=today, total_distance_km=total)
        )
        print(f"[DAILY-GOAL] badge awarded user={user_id} journey={trigger.id} total={total} km", flush=True)

    return awarded
