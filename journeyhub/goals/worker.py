"""
Background daily goal worker.

A single daemon thread runs one evaluation cycle, then waits on a stop event
for the configured interval. stop() sets the event, so a sleeping worker
wakes up at once and exits. Any exception inside a cycle is printed and the
next cycle runs on the normal schedule.
"""
import threading
import traceback
from datetime import date
from typing import Callable, Optional

from sqlalchemy.orm import Session

from journeyhub.core.config import DAILY_GOAL_INTERVAL_MINUTES, DAILY_GOAL_THRESHOLD_KM
from journeyhub.core.timeutil import utc_today, utcnow
from journeyhub.db.base import SessionLocal
from journeyhub.events.publisher import EventPublisher, get_publisher
from journeyhub.goals.evaluator import evaluate_daily_goals


class DailyGoalWorker:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        publisher: Optional[EventPublisher] = None,
        interval_seconds: float = DAILY_GOAL_INTERVAL_MINUTES * 60,
        threshold_km: float = DAILY_GOAL_THRESHOLD_KM,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self.session_factory = session_factory
        self.publisher = publisher or get_publisher()
        self.interval_seconds = interval_seconds
        self.threshold_km = threshold_km
        self.clock = clock
        self.cycles = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_cycle(self) -> None:
        db = self.session_factory()
        try:
            awarded = evaluate_daily_goals(
                db,
                self.clock(),
                self.publisher,
                threshold_km=self.threshold_km,
                stop_event=self._stop_event,
            )
            if awarded:
                print(f"[DAILY-GOAL] cycle awarded {len(awarded)} badge(s)", flush=True)
        finally:
            db.close()

    def _loop(self) -> None:
        print(f"[DAILY-GOAL] worker started at {utcnow().isoformat()} (interval={self.interval_seconds}s)", flush=True)
        while not self._stop_event.is_set():
            try:
                self.run_cycle()
            except Exception as e:
                print(f"[DAILY-GOAL] cycle failed: {e!r}", flush=True)
                traceback.print_exc()
            self.cycles += 1
            # Returns early when stop() is called
            self._stop_event.wait(self.interval_seconds)
        print(f"[DAILY-GOAL] worker stopping at {utcnow().isoformat()}", flush=True)

    def start(self) -> None:
        with self._lock:
            if self.running:
                print("[DAILY-GOAL] worker already running", flush=True)
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._loop, daemon=True, name="DailyGoalWorker")
            self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._lock:
            self._stop_event.set()
            thread = self._thread
        if thread is not None:
            thread.join(timeout)
