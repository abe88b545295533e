"""
Application configuration.

Settings come from environment variables (optionally a .env file).

Variables:
    DATABASE_URL              SQLAlchemy URL (default: sqlite file under logs/)
    TEST_MODE                 "true" switches to the test database
    DEFAULT_DECK_ID           Deck reviewed by default
    LEARNING_STEPS            Comma-separated learning steps in minutes ("1,10")
    GRADUATING_INTERVAL_DAYS  Interval after the last learning step
    EASY_INTERVAL_DAYS        Interval after EASY while learning
    LOG_LEVEL                 Logging level name (default: INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from core.srs.constants import DEFAULT_DECK_ID, DEFAULT_LADDER, LearningLadder
from core.srs.database import get_database_url, is_test_mode

load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    database_url: str
    test_mode: bool
    default_deck_id: str
    ladder: LearningLadder
    log_level: str


def _parse_steps(raw: str) -> tuple[float, ...]:
    try:
        steps = tuple(float(part) for part in raw.split(",") if part.strip())
    except ValueError as exc:
        raise ValueError(f"LEARNING_STEPS must be comma-separated minutes, got {raw!r}") from exc
    if not steps:
        raise ValueError("LEARNING_STEPS must contain at least one step")
    return steps


def _parse_days(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of days, got {raw!r}") from exc


def get_learning_ladder() -> LearningLadder:
    """Build the learning ladder, applying any environment overrides."""
    raw_steps = os.getenv("LEARNING_STEPS")
    steps = _parse_steps(raw_steps) if raw_steps else DEFAULT_LADDER.steps_minutes
    return LearningLadder(
        steps_minutes=steps,
        graduating_interval_days=_parse_days(
            "GRADUATING_INTERVAL_DAYS", DEFAULT_LADDER.graduating_interval_days
        ),
        easy_interval_days=_parse_days(
            "EASY_INTERVAL_DAYS", DEFAULT_LADDER.easy_interval_days
        ),
    )


def load_settings() -> Settings:
    """Read all settings from the environment."""
    return Settings(
        database_url=get_database_url(),
        test_mode=is_test_mode(),
        default_deck_id=os.getenv("DEFAULT_DECK_ID", DEFAULT_DECK_ID),
        ladder=get_learning_ladder(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for an entry point (app or script)."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
