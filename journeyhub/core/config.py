"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Daily goal: cumulative same-day distance that earns the badge.
DAILY_GOAL_THRESHOLD_KM = float(os.getenv("DAILY_GOAL_THRESHOLD_KM", "20.0"))

# Delay between two evaluation cycles of the background worker.
DAILY_GOAL_INTERVAL_MINUTES = float(os.getenv("DAILY_GOAL_INTERVAL_MINUTES", "30"))

# Set to 0 to run the API without the background worker (tests, one-off scripts).
DAILY_GOAL_WORKER_ENABLED = _env_flag("DAILY_GOAL_WORKER_ENABLED", "1")

# Domain events are POSTed here when set; otherwise they are only logged.
EVENT_WEBHOOK_URL = os.getenv("EVENT_WEBHOOK_URL", "").strip()

# Public links are rendered as f"{PUBLIC_LINK_PREFIX}/{token}".
PUBLIC_LINK_PREFIX = os.getenv("PUBLIC_LINK_PREFIX", "/api/journeys/public").rstrip("/")
