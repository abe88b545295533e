"""
Scheduler - Review Algorithm Logic

Pure scheduling and state updates (no database calls).

Main workflow:
1. Map the outcome to a quality number
2. Decide whether the item is still in its learning phase
3. Apply the failure, learning-success or mature-success rules
4. Return a new state with the next review date and one history record

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from core.srs.constants import (
    DEFAULT_LADDER,
    EASY_EASINESS_BONUS,
    EASY_INTERVAL_BONUS,
    LAPSE_EASINESS_PENALTY,
    MAX_EASY_EASINESS,
    MAX_QUALITY,
    MIN_EASINESS,
    MIN_QUALITY,
    PASS_EASINESS_PENALTY,
    PASS_INTERVAL_MULTIPLIER,
    PASSING_QUALITY,
    QUALITY_BY_OUTCOME,
    LearningLadder,
    ReviewOutcome,
)
from core.srs.errors import InvalidRating
from core.srs.memory_state import ItemMemoryState, QualityRecord, ensure_utc


@dataclass(frozen=True)
class _Transition:
    """Scheduling fields produced by one branch of the algorithm."""
    easiness: float
    repetitions: int
    interval: float
    is_learning: bool
    current_learning_step: int


def quality_for(rating: Union[ReviewOutcome, int]) -> int:
    """
    Resolve a rating to its quality number.

    Raw integers are accepted for callers that already hold a quality
    value; anything outside 0-5 is rejected.
    """
    if isinstance(rating, ReviewOutcome):
        return QUALITY_BY_OUTCOME[rating]
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating(rating)
    if rating < MIN_QUALITY or rating > MAX_QUALITY:
        raise InvalidRating(rating)
    return rating


def round_half_up(value: float) -> int:
    """Round x.5 upwards (2.5 -> 3), unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))


def apply_review(
    state: ItemMemoryState,
    rating: Union[ReviewOutcome, int],
    note: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    ladder: LearningLadder = DEFAULT_LADDER
) -> ItemMemoryState:
    """
    Apply one review and return the item's next state.

    The input state is never modified; calling twice with the same
    arguments (including `now`) yields equal results.

    Args:
        state: Current item state
        rating: Review outcome (or raw quality 0-5)
        note: Optional elaboration; replaces the stored note when non-blank
        now: Review timestamp (defaults to current UTC time)
        ladder: Learning steps and graduation intervals

    Returns:
        New ItemMemoryState

    Raises:
        InvalidRating: quality outside 0-5
    """
    quality = quality_for(rating)
    now = ensure_utc(now) or datetime.now(timezone.utc)

    was_in_learning = state.in_learning_phase

    if quality < PASSING_QUALITY:
        transition = _apply_failure(state, was_in_learning, ladder)
    elif was_in_learning:
        transition = _apply_learning_success(state, quality, ladder)
    else:
        transition = _apply_mature_success(state, quality)

    record = QualityRecord(
        timestamp=now,
        quality=quality,
        interval=transition.interval,
        easiness=transition.easiness,
        is_learning=transition.is_learning,
    )

    cleaned_note = note.strip() if note else ""

    return replace(
        state,
        easiness=transition.easiness,
        repetitions=transition.repetitions,
        interval=transition.interval,
        is_learning=transition.is_learning,
        current_learning_step=transition.current_learning_step,
        last_reviewed=now,
        next_review_date=now + timedelta(days=transition.interval),
        quality_history=state.quality_history + (record,),
        note=cleaned_note or state.note,
    )


def _apply_failure(
    state: ItemMemoryState,
    was_in_learning: bool,
    ladder: LearningLadder
) -> _Transition:
    """
    Failure (AGAIN or HARD): restart the learning ladder.

    HARD is handled exactly like AGAIN. Only mature items lapsing now
    pay the easiness penalty.
    """
    easiness = state.easiness
    if not was_in_learning:
        easiness = max(MIN_EASINESS, easiness - LAPSE_EASINESS_PENALTY)

    return _Transition(
        easiness=easiness,
        repetitions=0,
        interval=ladder.step_interval_days(0),
        is_learning=True,
        current_learning_step=0,
    )


def _apply_learning_success(
    state: ItemMemoryState,
    quality: int,
    ladder: LearningLadder
) -> _Transition:
    """
    Success while learning: EASY graduates immediately, GOOD climbs one
    step or graduates from the last one. Easiness is untouched.
    """
    if quality == MAX_QUALITY:
        return _Transition(
            easiness=state.easiness,
            repetitions=1,
            interval=float(ladder.easy_interval_days),
            is_learning=False,
            current_learning_step=0,
        )

    if state.current_learning_step < ladder.last_step:
        next_step = state.current_learning_step + 1
        return _Transition(
            easiness=state.easiness,
            repetitions=0,
            interval=ladder.step_interval_days(next_step),
            is_learning=True,
            current_learning_step=next_step,
        )

    return _Transition(
        easiness=state.easiness,
        repetitions=1,
        interval=float(ladder.graduating_interval_days),
        is_learning=False,
        current_learning_step=0,
    )


def _apply_mature_success(state: ItemMemoryState, quality: int) -> _Transition:
    """
    Success on a graduated item: grow the interval by the easiness factor.

    Quality 3 cannot be produced by a ReviewOutcome; its path is kept for
    raw quality callers.
    """
    if quality == MAX_QUALITY:
        easiness = min(MAX_EASY_EASINESS, state.easiness + EASY_EASINESS_BONUS)
        interval = round_half_up(state.interval * easiness * EASY_INTERVAL_BONUS)
    elif quality == PASSING_QUALITY:
        easiness = max(MIN_EASINESS, state.easiness - PASS_EASINESS_PENALTY)
        interval = round_half_up(state.interval * PASS_INTERVAL_MULTIPLIER)
    else:
        easiness = state.easiness
        interval = round_half_up(state.interval * easiness)

    return _Transition(
        easiness=easiness,
        repetitions=state.repetitions + 1,
        interval=float(max(1, interval)),
        is_learning=False,
        current_learning_step=0,
    )
