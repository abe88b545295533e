"""
Memory State - Item Scheduling State

Defines the persisted scheduling fields of one learnable item.

Key concepts:
- Easiness: per-item multiplier controlling interval growth (>= 1.3)
- Repetitions: successful graduations / mature passes, not total reviews
- Learning phase: sub-day ladder steps before day-scale intervals
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from core.srs.constants import INITIAL_EASINESS, MIN_EASINESS, DEFAULT_DECK_ID


@dataclass(frozen=True)
class QualityRecord:
    """One write-once entry of an item's review history."""
    timestamp: datetime
    quality: int
    interval: float  # resulting interval (days)
    easiness: float  # resulting easiness
    is_learning: bool  # learning flag after the review


@dataclass(frozen=True)
class ItemMemoryState:
    """
    Scheduling state for a single item (question/answer pair).

    Instances are immutable; the scheduler returns a new state per review.
    """
    item_id: str
    deck_id: str
    front: str
    back: str

    # Scheduling fields
    easiness: float
    repetitions: int
    interval: float  # days, fractional while learning
    is_learning: bool
    current_learning_step: int

    # Review tracking
    last_reviewed: Optional[datetime]
    next_review_date: datetime

    quality_history: tuple[QualityRecord, ...] = ()
    note: Optional[str] = None  # last elaboration written by the learner
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.easiness < MIN_EASINESS:
            raise ValueError(
                f"Easiness must be >= {MIN_EASINESS}, got {self.easiness} ({self.item_id})"
            )
        if self.repetitions < 0 or self.current_learning_step < 0:
            raise ValueError(f"Negative counters on item {self.item_id}")

    @property
    def in_learning_phase(self) -> bool:
        """True for new or lapsed items (queue priority and engine branch)."""
        return self.is_learning or self.repetitions == 0

    def is_due(self, now: datetime) -> bool:
        return self.next_review_date <= now


def ensure_utc(timestamp: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize timestamps to timezone-aware UTC.

    Naive values (e.g. read back from SQLite) are assumed to be UTC.
    """
    if timestamp is None:
        return None
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def new_item_id() -> str:
    return str(uuid.uuid4())


def initialize_new_item(
    item_id: str,
    front: str,
    back: str,
    deck_id: str = DEFAULT_DECK_ID,
    tags: tuple[str, ...] = (),
    now: Optional[datetime] = None
) -> ItemMemoryState:
    """
    Initialize state for a new item (never reviewed).

    New items start in the learning phase and are due immediately.

    Args:
        item_id: Unique item identifier
        front: Question side
        back: Answer side
        deck_id: Deck the item belongs to
        tags: Free-form tags
        now: Creation time (defaults to current UTC time)

    Returns:
        New ItemMemoryState initialized with defaults
    """
    now = ensure_utc(now) or datetime.now(timezone.utc)

    return ItemMemoryState(
        item_id=item_id,
        deck_id=deck_id,
        front=front,
        back=back,
        easiness=INITIAL_EASINESS,
        repetitions=0,
        interval=0.0,
        is_learning=True,
        current_learning_step=0,
        last_reviewed=None,
        next_review_date=now,
        tags=tuple(tags),
    )
