"""
Review queue for a study session.

Selects due items of one deck and orders them learning-first, then by
due date. The order is fixed for the lifetime of a session.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from core.srs.memory_state import ItemMemoryState, ensure_utc


def queue_sort_key(item: ItemMemoryState) -> tuple[int, datetime]:
    """Learning/new items first (0), then mature (1); ties by due date."""
    return (0 if item.in_learning_phase else 1, item.next_review_date)


def select_due(
    items: Iterable[ItemMemoryState],
    deck_id: str,
    now: datetime
) -> list[ItemMemoryState]:
    """
    Filter and sort due items of one deck (no DB calls).
    """
    now = ensure_utc(now)
    due = [item for item in items if item.deck_id == deck_id and item.is_due(now)]
    due.sort(key=queue_sort_key)  # stable
    return due


def build_queue(
    items: Iterable[ItemMemoryState],
    deck_id: str,
    now: datetime
) -> list[str]:
    """
    Build the ordered list of item ids due for review.

    Args:
        items: Full item collection (any order)
        deck_id: Deck to review
        now: Reference time

    Returns:
        Item ids, learning-first then ascending next_review_date
    """
    return [item.item_id for item in select_due(items, deck_id, now)]


class ReviewQueue:
    """
    Ordered sequence of item ids with a cursor.

    Never re-sorts; a rebuilt queue is a new ReviewQueue.
    """

    def __init__(self, item_ids: Iterable[str]):
        self._item_ids: tuple[str, ...] = tuple(item_ids)
        self._position = 0

    @classmethod
    def from_items(
        cls,
        items: Iterable[ItemMemoryState],
        deck_id: str,
        now: datetime
    ) -> "ReviewQueue":
        return cls(build_queue(items, deck_id, now))

    @property
    def item_ids(self) -> tuple[str, ...]:
        return self._item_ids

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._item_ids)

    @property
    def remaining(self) -> int:
        return self.total - self._position

    @property
    def is_complete(self) -> bool:
        return self._position >= self.total

    @property
    def current_id(self) -> Optional[str]:
        if self.is_complete:
            return None
        return self._item_ids[self._position]

    def advance(self) -> Optional[str]:
        """
        Move the cursor to the next item.

        Returns:
            The new current id, or None once the queue is exhausted
        """
        if not self.is_complete:
            self._position += 1
        return self.current_id

    def __len__(self) -> int:
        return self.total

    def __repr__(self) -> str:
        return f"<ReviewQueue({self._position}/{self.total})>"
