"""
Post-review feedback messages.

Builds the short notice shown after a rating is committed, from the
item's state before and after the review.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.srs.constants import ReviewOutcome
from core.srs.memory_state import ItemMemoryState
from core.srs.time_estimate import format_estimate


FeedbackTone = Literal["success", "error", "info", "warning"]


@dataclass(frozen=True)
class ReviewFeedback:
    """Notice describing the outcome of one committed review."""
    text: str
    tone: FeedbackTone
    interval: float
    estimate: str


def build_feedback(
    before: ItemMemoryState,
    after: ItemMemoryState,
    rating: ReviewOutcome
) -> ReviewFeedback:
    """
    Describe a committed review.

    Args:
        before: Item state shown to the learner
        after: State returned by the scheduler
        rating: Outcome the learner chose

    Returns:
        ReviewFeedback with text, tone and formatted interval
    """
    estimate = format_estimate(after.interval)
    was_learning = before.in_learning_phase
    graduated = was_learning and not after.is_learning

    if rating == ReviewOutcome.AGAIN:
        if was_learning:
            text = f"Restarting learning. You'll see it again in {estimate}."
        else:
            text = f"Forgotten. Relearning starts in {estimate}."
        tone: FeedbackTone = "error"
    elif rating == ReviewOutcome.HARD:
        text = f"Tough one. Back to the first step in {estimate}."
        tone = "warning"
    elif rating == ReviewOutcome.GOOD:
        if graduated:
            text = f"Graduated! Next review in {estimate}."
        elif after.is_learning:
            text = f"Good progress. Next step in {estimate}."
        else:
            text = f"Well remembered! Next review in {estimate}."
        tone = "success"
    else:
        if was_learning:
            text = f"Fast graduation! Interval jumps to {estimate}."
        else:
            text = f"Perfect! Interval extended to {estimate}."
        tone = "success"

    return ReviewFeedback(text=text, tone=tone, interval=after.interval, estimate=estimate)
