"""
Constants for review analytics.
"""

from __future__ import annotations

from typing import Final

from core.srs.constants import PASSING_QUALITY, QUALITY_BY_OUTCOME


QUALITY_LABELS: Final[dict[int, str]] = {
    quality: outcome.value.title()
    for outcome, quality in QUALITY_BY_OUTCOME.items()
}

# A review counts as "retained" when it reaches the passing quality
RETAINED_MIN_QUALITY: Final[int] = PASSING_QUALITY

EVENT_COLUMNS: Final[list[str]] = [
    "item_id", "deck_id", "timestamp", "quality", "interval", "is_learning", "session_id", "day_utc"
]

SNAPSHOT_COLUMNS: Final[list[str]] = [
    "item_id", "deck_id", "is_learning", "repetitions", "interval", "easiness", "next_review_date"
]
