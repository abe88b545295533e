"""
SRS Constants and Parameters

All configurable parameters for the review scheduler in one place:
rating outcomes, the learning ladder and the easiness bounds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional


# ---- Review Outcomes ----

class ReviewOutcome(str, Enum):
    """Learner's self-rated recall for one review."""
    AGAIN = "AGAIN"  # Forgot entirely
    HARD = "HARD"    # Remembered with significant effort
    GOOD = "GOOD"    # Remembered with minor hesitation
    EASY = "EASY"    # Remembered effortlessly


# Closed mapping to internal quality numbers (0-5 scale).
# No outcome maps to 0 or 3.
QUALITY_BY_OUTCOME: Final[dict[ReviewOutcome, int]] = {
    ReviewOutcome.AGAIN: 1,
    ReviewOutcome.HARD: 2,
    ReviewOutcome.GOOD: 4,
    ReviewOutcome.EASY: 5,
}

OUTCOME_ORDER: Final[tuple[ReviewOutcome, ...]] = (
    ReviewOutcome.AGAIN,
    ReviewOutcome.HARD,
    ReviewOutcome.GOOD,
    ReviewOutcome.EASY,
)

# Keyboard shortcuts (Anki style): one digit per outcome
KEY_BINDINGS: Final[dict[str, ReviewOutcome]] = {
    "1": ReviewOutcome.AGAIN,
    "2": ReviewOutcome.HARD,
    "3": ReviewOutcome.GOOD,
    "4": ReviewOutcome.EASY,
}

MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3


def outcome_for_key(key: str) -> Optional[ReviewOutcome]:
    """Return the outcome bound to a keyboard key, or None."""
    return KEY_BINDINGS.get(key.strip())


# ---- Easiness Factor ----

INITIAL_EASINESS = 2.5
MIN_EASINESS = 1.3
MAX_EASY_EASINESS = 2.5   # Cap applied by the mature EASY path

LAPSE_EASINESS_PENALTY = 0.2
EASY_EASINESS_BONUS = 0.15
PASS_EASINESS_PENALTY = 0.15  # quality == 3, unreachable via ReviewOutcome

EASY_INTERVAL_BONUS = 1.3
PASS_INTERVAL_MULTIPLIER = 1.2

MINUTES_PER_DAY = 24 * 60


# ---- Learning Ladder ----

@dataclass(frozen=True)
class LearningLadder:
    """
    Fixed learning steps plus graduation intervals.

    steps_minutes: durations of the sub-day learning steps
    graduating_interval_days: interval after passing the last step with GOOD
    easy_interval_days: interval after EASY while still learning
    """
    steps_minutes: tuple[float, ...] = (1, 10)
    graduating_interval_days: float = 1
    easy_interval_days: float = 4

    def __post_init__(self):
        if not self.steps_minutes:
            raise ValueError("Learning ladder needs at least one step")
        if any(step <= 0 for step in self.steps_minutes):
            raise ValueError(f"Learning steps must be positive: {self.steps_minutes}")
        if self.graduating_interval_days <= 0 or self.easy_interval_days <= 0:
            raise ValueError("Graduation intervals must be positive")

    @property
    def last_step(self) -> int:
        return len(self.steps_minutes) - 1

    def step_interval_days(self, step: int) -> float:
        """Length of a learning step expressed in (fractional) days."""
        return self.steps_minutes[step] / MINUTES_PER_DAY


DEFAULT_LADDER: Final[LearningLadder] = LearningLadder()


# ---- Review Queue / Reminders ----

DEFAULT_DECK_ID = "default-deck"

# Forgetting-curve offsets used to place review reminders
REMINDER_WINDOWS_DAYS: Final[tuple[int, ...]] = (1, 3, 7, 14, 30)
