"""
Run one daily goal evaluation cycle by hand.

Purpose:
- Award badges without waiting for the background worker
- Backfill a past day: python scripts/run_daily_goal_cycle.py 2026-10-18
- SAFE to run multiple times (a user never gets two badges for one day)
"""
import sys
from datetime import date

from sqlalchemy.orm import Session

from journeyhub.core.timeutil import utc_today
from journeyhub.db import models  # noqa: F401
from journeyhub.db.base import SessionLocal
from journeyhub.events.publisher import get_publisher
from journeyhub.goals.evaluator import evaluate_daily_goals


def run_daily_goal_cycle(day: date):
    db: Session = SessionLocal()

    try:
        awarded = evaluate_daily_goals(db, day, get_publisher())

        print(f"✅ Daily goal cycle complete for {day.isoformat()}")
        print(f"   Badges awarded: {len(awarded)}")
        for badge in awarded:
            print(f"   - user={badge.user_id} total={badge.total_distance_km} km")

    except Exception as e:
        db.rollback()
        print("❌ Error while evaluating daily goals")
        print(str(e))
        raise
    finally:
        db.close()


if __name__ == "__main__":
    target = date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else utc_today()
    run_daily_goal_cycle(target)
