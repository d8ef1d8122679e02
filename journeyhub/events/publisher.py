"""
Domain event publishing.

Publishing is fire-and-forget from the caller's side: failures are logged
and never raised, delivery guarantees belong to whatever receives the event.
"""
import json
import threading
from abc import ABC, abstractmethod
from typing import Optional

import requests

from journeyhub.core.config import EVENT_WEBHOOK_URL

DAILY_GOAL_ACHIEVED = "DailyGoalAchieved"


class EventPublisher(ABC):
    """Sink for domain events. Implementations must not raise on delivery failure."""

    @abstractmethod
    def publish(self, event_name: str, payload: dict, stop_event: Optional[threading.Event] = None) -> None:
        ...


class LogEventPublisher(EventPublisher):
    """Default publisher: one log line per event."""

    def publish(self, event_name, payload, stop_event=None):
        print(f"[EVENTS] {event_name} {json.dumps(payload, default=str)}", flush=True)


class WebhookEventPublisher(EventPublisher):
    """POST {"event": ..., "payload": ...} to a configured URL."""

    def __init__(self, url: str, timeout: float = 10) -> None:
        self.url = url
        self.timeout = timeout

    def publish(self, event_name, payload, stop_event=None):
        if stop_event is not None and stop_event.is_set():
            print(f"[EVENTS] shutdown in progress, dropping {event_name}", flush=True)
            return
        try:
            r = requests.post(
                self.url,
                data=json.dumps({"event": event_name, "payload": payload}, default=str),
                headers={"content-type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            print(f"[EVENTS] {event_name} webhook network error: {e!r}", flush=True)
            return
        if not (200 <= r.status_code < 300):
            print(f"[EVENTS] {event_name} webhook FAILED status={r.status_code}", flush=True)


def get_publisher() -> EventPublisher:
    if EVENT_WEBHOOK_URL:
        return WebhookEventPublisher(EVENT_WEBHOOK_URL)
    return LogEventPublisher()
