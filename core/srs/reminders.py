"""
Review reminder planning.

Turns item due dates into per-deck, per-day reminder suggestions for an
external calendar. Nothing here writes calendar entries.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from core.srs.constants import REMINDER_WINDOWS_DAYS
from core.srs.memory_state import ItemMemoryState, ensure_utc


@dataclass(frozen=True)
class ReviewReminder:
    """Suggested review block for one deck on one day."""
    deck_id: str
    day: date
    item_count: int

    @property
    def reminder_id(self) -> str:
        return f"spacing-{self.deck_id}-{self.day.isoformat()}"


def optimal_review_windows(now: datetime) -> list[datetime]:
    """Forgetting-curve checkpoints (1, 3, 7, 14, 30 days from now)."""
    now = ensure_utc(now)
    return [now + timedelta(days=offset) for offset in REMINDER_WINDOWS_DAYS]


def plan_review_reminders(
    items: Iterable[ItemMemoryState],
    start: datetime,
    days_ahead: int = 30
) -> list[ReviewReminder]:
    """
    Group upcoming due dates into one reminder per deck and day.

    Only items due within [start, start + days_ahead] are considered.
    """
    start = ensure_utc(start)
    end = start + timedelta(days=days_ahead)

    counts: Counter[tuple[str, date]] = Counter()
    for item in items:
        due = item.next_review_date
        if start <= due <= end:
            counts[(item.deck_id, due.date())] += 1

    reminders = [
        ReviewReminder(deck_id=deck_id, day=day, item_count=count)
        for (deck_id, day), count in counts.items()
    ]
    reminders.sort(key=lambda r: (r.day, r.deck_id))
    return reminders
