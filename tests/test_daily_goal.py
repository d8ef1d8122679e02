import threading
import time
from datetime import date, datetime
from decimal import Decimal

import pytest

from journeyhub.badges import repo as badges_repo
from journeyhub.badges.models import DailyGoalBadge
from journeyhub.db.base import SessionLocal
from journeyhub.events.publisher import DAILY_GOAL_ACHIEVED, EventPublisher
from journeyhub.goals.evaluator import evaluate_daily_goals, find_goal_trigger
from journeyhub.goals.worker import DailyGoalWorker
from journeyhub.journeys.models import Journey

TODAY = date(2026, 10, 19)


def _on_today(hour, minute=0):
    return datetime(2026, 10, 19, hour, minute)


def _seed_distances(make_user, make_journey, distances, username="walker"):
    """Journeys in arrival order, inserted in reverse to exercise the sort."""
    user = make_user(username)
    created = []
    for i, distance in reversed(list(enumerate(distances))):
        created.append(
            make_journey(user.id, _on_today(6 + i), _on_today(6 + i, 30), distance=distance)
        )
    created.reverse()
    return user, created


def test_badge_on_second_journey_for_12_then_9(db, make_user, make_journey, publisher):
    user, journeys = _seed_distances(make_user, make_journey, ["12", "9"])

    awarded = evaluate_daily_goals(db, TODAY, publisher)

    assert len(awarded) == 1
    assert awarded[0].journey_id == journeys[1].id
    assert awarded[0].total_distance_km == Decimal("21")

    badge = db.query(DailyGoalBadge).one()
    assert badge.user_id == user.id
    assert badge.date == TODAY
    assert badge.total_distance_km == Decimal("21")

    db.expire_all()
    assert db.get(Journey, journeys[1].id).is_daily_goal_achieved is True
    assert db.get(Journey, journeys[0].id).is_daily_goal_achieved is False

    assert publisher.events == [(DAILY_GOAL_ACHIEVED, {"user_id": user.id, "date": "2026-10-19"})]


def test_badge_on_first_journey_for_25(db, make_user, make_journey, publisher):
    _user, journeys = _seed_distances(make_user, make_journey, ["25"])

    awarded = evaluate_daily_goals(db, TODAY, publisher)

    assert awarded[0].journey_id == journeys[0].id
    assert awarded[0].total_distance_km == Decimal("25")


def test_no_badge_below_threshold(db, make_user, make_journey, publisher):
    _seed_distances(make_user, make_journey, ["5", "5"])

    assert evaluate_daily_goals(db, TODAY, publisher) == []
    assert db.query(DailyGoalBadge).count() == 0
    assert publisher.events == []


def test_exact_threshold_counts(db, make_user, make_journey, publisher):
    _seed_distances(make_user, make_journey, ["10", "10"])

    awarded = evaluate_daily_goals(db, TODAY, publisher)

    assert awarded[0].total_distance_km == Decimal("20")


def test_second_run_same_day_awards_nothing(db, make_user, make_journey, publisher):
    _seed_distances(make_user, make_journey, ["25"])

    evaluate_daily_goals(db, TODAY, publisher)
    again = evaluate_daily_goals(db, TODAY, publisher)

    assert again == []
    assert db.query(DailyGoalBadge).count() == 1
    assert len(publisher.events) == 1


def test_later_cycle_awards_once_more_journeys_arrive(db, make_user, make_journey, publisher):
    user, _ = _seed_distances(make_user, make_journey, ["15"])
    assert evaluate_daily_goals(db, TODAY, publisher) == []

    make_journey(user.id, _on_today(18), _on_today(19), distance="6")
    awarded = evaluate_daily_goals(db, TODAY, publisher)

    assert len(awarded) == 1
    assert awarded[0].total_distance_km == Decimal("21")


def test_only_todays_journeys_count(db, make_user, make_journey, publisher):
    user = make_user("commuter")
    make_journey(user.id, datetime(2026, 10, 18, 23), datetime(2026, 10, 19, 1), distance="30")
    make_journey(user.id, _on_today(9), _on_today(10), distance="5")

    assert evaluate_daily_goals(db, TODAY, publisher) == []


def test_users_are_evaluated_independently(db, make_user, make_journey, publisher):
    _seed_distances(make_user, make_journey, ["25"], username="fast")
    _seed_distances(make_user, make_journey, ["3"], username="slow")

    awarded = evaluate_daily_goals(db, TODAY, publisher)

    assert len(awarded) == 1
    assert db.query(DailyGoalBadge).count() == 1


def test_unique_constraint_blocks_a_second_badge(db, make_user):
    user = make_user("racer")
    first = DailyGoalBadge(user_id=user.id, date=TODAY, total_distance_km=Decimal("21"))
    second = DailyGoalBadge(user_id=user.id, date=TODAY, total_distance_km=Decimal("30"))

    assert badges_repo.add_badge(db, first) is True
    assert badges_repo.add_badge(db, second) is False
    assert badges_repo.exists_for_user_on_date(db, user.id, TODAY) is True


def test_find_goal_trigger_orders_by_arrival_time():
    late = Journey(id="late", arrival_time=_on_today(20), route_distance_km=Decimal("15"))
    early = Journey(id="early", arrival_time=_on_today(8), route_distance_km=Decimal("9"))
    middle = Journey(id="middle", arrival_time=_on_today(12), route_distance_km=Decimal("12"))

    trigger, total = find_goal_trigger([late, early, middle], 20.0)

    assert trigger.id == "middle"
    assert total == Decimal("21")


def test_stop_event_ends_cycle_before_next_user(db, make_user, make_journey, publisher):
    _seed_distances(make_user, make_journey, ["25"], username="a")
    stop = threading.Event()
    stop.set()

    assert evaluate_daily_goals(db, TODAY, publisher, stop_event=stop) == []


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_worker_survives_a_failing_cycle(publisher):
    calls = {"n": 0}

    def flaky_session():
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("database unavailable")
        return SessionLocal()

    worker = DailyGoalWorker(
        session_factory=flaky_session,
        publisher=publisher,
        interval_seconds=0.01,
        clock=lambda: TODAY,
    )
    worker.start()
    try:
        assert _wait_for(lambda: worker.cycles >= 3)
    finally:
        worker.stop()

    assert calls["n"] >= 3
    assert not worker.running


def test_worker_stop_interrupts_the_wait(publisher):
    worker = DailyGoalWorker(
        session_factory=SessionLocal,
        publisher=publisher,
        interval_seconds=3600,
        clock=lambda: TODAY,
    )
    worker.start()
    assert _wait_for(lambda: worker.cycles >= 1)

    started = time.monotonic()
    worker.stop(timeout=5)

    assert not worker.running
    assert time.monotonic() - started < 2


def test_worker_awards_badges(make_user, make_journey, publisher):
    user, _ = _seed_distances(make_user, make_journey, ["12", "9"])
    worker = DailyGoalWorker(
        session_factory=SessionLocal,
        publisher=publisher,
        interval_seconds=3600,
        clock=lambda: TODAY,
    )
    worker.run_cycle()

    assert [payload["user_id"] for _, payload in publisher.events] == [user.id]


@pytest.mark.parametrize("distances,expected", [
    (["12", "9"], Decimal("21")),
    (["25"], Decimal("25")),
    (["5", "5"], None),
])
def test_threshold_table(distances, expected):
    journeys = [
        Journey(id=str(i), arrival_time=_on_today(8 + i), route_distance_km=Decimal(d))
        for i, d in enumerate(distances)
    ]
    trigger, total = find_goal_trigger(journeys, 20.0)
    if expected is None:
        assert trigger is None
    else:
        assert total == expected


def test_publisher_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        EventPublisher()
