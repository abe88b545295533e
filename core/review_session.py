"""
Review session controller.

Owns one study session: the due queue, the item under review and the
reveal -> rate -> commit cycle. A session belongs to a single caller;
the scheduler and formatter it uses are pure.

States:
    NOT_STARTED -> AWAITING_REVEAL -> AWAITING_RATING -> COMMITTING
                -> AWAITING_REVEAL (next item) | SESSION_COMPLETE
    any state   -> ABANDONED (abandon())
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from core.review_queue import ReviewQueue
from core.srs.constants import DEFAULT_DECK_ID, DEFAULT_LADDER, OUTCOME_ORDER, PASSING_QUALITY, LearningLadder, ReviewOutcome, outcome_for_key
from core.srs.database import RecordStore
from core.srs.errors import InvalidSessionState, PersistenceFailure, SessionBusy
from core.srs.feedback import ReviewFeedback, build_feedback
from core.srs.memory_state import ItemMemoryState, ensure_utc
from core.srs.scheduler import apply_review, quality_for
from core.srs.time_estimate import format_estimate

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_REVEAL = "awaiting_reveal"
    AWAITING_RATING = "awaiting_rating"
    COMMITTING = "committing"
    SESSION_COMPLETE = "session_complete"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class SessionSummary:
    """Handed to completion hooks (e.g. the reflection prompt)."""
    session_id: str
    deck_id: str
    total_items: int
    reviewed_count: int
    correct_count: int
    started_at: datetime
    finished_at: datetime
    outcome_counts: dict[ReviewOutcome, int] = field(default_factory=dict)

    @property
    def accuracy(self) -> Optional[float]:
        if self.reviewed_count == 0:
            return None
        return self.correct_count / self.reviewed_count


CompletionHook = Callable[[SessionSummary], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReviewSession:
    """
    Explicit-lifecycle review session (start, reveal, commit, complete).

    Args:
        store: Record store used to load due items and persist reviews
        deck_id: Deck to review
        ladder: Learning steps passed to the scheduler
        clock: Returns the current time (injectable for tests)
        session_id: Identifier tagged on stored review events
    """

    def __init__(
        self,
        store: RecordStore,
        deck_id: str = DEFAULT_DECK_ID,
        ladder: LearningLadder = DEFAULT_LADDER,
        clock: Callable[[], datetime] = _utc_now,
        session_id: Optional[str] = None
    ):
        self.store = store
        self.deck_id = deck_id
        self.ladder = ladder
        self.clock = clock
        self.session_id = session_id or str(uuid.uuid4())

        self.queue = ReviewQueue(())
        self.last_error: Optional[str] = None
        self.last_feedback: Optional[ReviewFeedback] = None
        self.reviewed_count = 0
        self.correct_count = 0

        self._state = SessionState.NOT_STARTED
        self._items: dict[str, ItemMemoryState] = {}
        self._current: Optional[ItemMemoryState] = None
        self._outcomes: Counter[ReviewOutcome] = Counter()
        self._hooks: list[CompletionHook] = []
        self._summary: Optional[SessionSummary] = None
        self._started_at: Optional[datetime] = None
        self._commit_lock = threading.Lock()

    # ---- Properties ----

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_item(self) -> Optional[ItemMemoryState]:
        return self._current

    @property
    def is_complete(self) -> bool:
        return self._state == SessionState.SESSION_COMPLETE

    @property
    def is_busy(self) -> bool:
        return self._state == SessionState.COMMITTING

    @property
    def summary(self) -> Optional[SessionSummary]:
        return self._summary

    # ---- Lifecycle ----

    def on_session_complete(self, hook: CompletionHook) -> None:
        """
        Register a hook fired once when the queue is exhausted.

        Hooks registered after completion run immediately.
        """
        self._hooks.append(hook)
        if self._summary is not None:
            hook(self._summary)

    def start(self, now: Optional[datetime] = None) -> None:
        """
        Build the due queue and show the first item.

        An empty queue completes the session immediately.
        """
        if self._state != SessionState.NOT_STARTED:
            raise InvalidSessionState(f"Session already {self._state.value}")

        now = ensure_utc(now) or self.clock()
        self._started_at = now

        due_items = self.store.query_due(self.deck_id, now)
        self._items = {item.item_id: item for item in due_items}
        self.queue = ReviewQueue.from_items(due_items, self.deck_id, now)

        logger.info(
            "Session %s started: %d items due in deck %s",
            self.session_id, self.queue.total, self.deck_id
        )
        self._load_current()

    def abandon(self) -> None:
        """Leave the session; nothing further is written."""
        if self._state in (SessionState.SESSION_COMPLETE, SessionState.ABANDONED):
            return
        logger.info(
            "Session %s abandoned after %d reviews", self.session_id, self.reviewed_count
        )
        self._state = SessionState.ABANDONED
        self._current = None

    def _load_current(self) -> None:
        item_id = self.queue.current_id
        if item_id is None:
            self._complete()
            return
        self._current = self._items[item_id]
        self._state = SessionState.AWAITING_REVEAL

    def _complete(self) -> None:
        self._current = None
        self._state = SessionState.SESSION_COMPLETE
        self._summary = SessionSummary(
            session_id=self.session_id,
            deck_id=self.deck_id,
            total_items=self.queue.total,
            reviewed_count=self.reviewed_count,
            correct_count=self.correct_count,
            started_at=self._started_at,
            finished_at=self.clock(),
            outcome_counts=dict(self._outcomes),
        )
        logger.info(
            "Session %s complete: %d reviewed, %d correct",
            self.session_id, self.reviewed_count, self.correct_count
        )
        for hook in self._hooks:
            hook(self._summary)

    def _require(self, expected: SessionState) -> None:
        if self._state == SessionState.COMMITTING:
            raise SessionBusy("A review is still being saved")
        if self._state != expected:
            raise InvalidSessionState(
                f"Expected {expected.value}, session is {self._state.value}"
            )

    # ---- Review cycle ----

    def reveal(self) -> ItemMemoryState:
        """Show the answer side of the current item."""
        self._require(SessionState.AWAITING_REVEAL)
        self._state = SessionState.AWAITING_RATING
        return self._current

    def preview_intervals(self, note: Optional[str] = None) -> dict[ReviewOutcome, float]:
        """
        Interval (days) each outcome would produce, without committing.
        """
        self._require(SessionState.AWAITING_RATING)
        now = self.clock()
        return {
            outcome: apply_review(self._current, outcome, note, now=now, ladder=self.ladder).interval
            for outcome in OUTCOME_ORDER
        }

    def preview_all(self, note: Optional[str] = None) -> dict[ReviewOutcome, str]:
        """
        Formatted interval for each of the four outcomes.

        Side-effect free; the live item is never modified.
        """
        return {
            outcome: format_estimate(interval)
            for outcome, interval in self.preview_intervals(note).items()
        }

    def commit(self, rating: ReviewOutcome, note: Optional[str] = None) -> ReviewFeedback:
        """
        Apply a rating to the current item, persist it and move on.

        Args:
            rating: Outcome chosen by the learner
            note: Optional elaboration stored with the item

        Returns:
            Feedback for the committed review

        Raises:
            SessionBusy: a commit is already in flight
            InvalidSessionState: answer not revealed / session not active
            PersistenceFailure: store rejected the write; the session stays
                on the same item awaiting a rating
        """
        if not isinstance(rating, ReviewOutcome):
            rating = ReviewOutcome(rating)

        if not self._commit_lock.acquire(blocking=False):
            raise SessionBusy("A review is still being saved")
        try:
            self._require(SessionState.AWAITING_RATING)
            before = self._current
            after = apply_review(before, rating, note, now=self.clock(), ladder=self.ladder)

            self._state = SessionState.COMMITTING
            saved = False
            try:
                self.store.put(
                    before.item_id,
                    after,
                    expected_last_reviewed=before.last_reviewed,
                    session_id=self.session_id,
                )
                saved = True
            except Exception as exc:
                self.last_error = f"Could not save review: {exc}"
                logger.warning(
                    "Session %s: saving %s failed: %s", self.session_id, before.item_id, exc
                )
                if isinstance(exc, PersistenceFailure):
                    raise
                raise PersistenceFailure(str(exc)) from exc
            finally:
                if not saved and self._state == SessionState.COMMITTING:
                    self._state = SessionState.AWAITING_RATING
        finally:
            self._commit_lock.release()

        feedback = build_feedback(before, after, rating)
        self.last_error = None
        self.last_feedback = feedback
        self.reviewed_count += 1
        if quality_for(rating) >= PASSING_QUALITY:
            self.correct_count += 1
        self._outcomes[rating] += 1
        self._items[after.item_id] = after

        if self._state == SessionState.ABANDONED:
            return feedback

        self.queue.advance()
        self._load_current()
        return feedback

    def commit_key(self, key: str, note: Optional[str] = None) -> Optional[ReviewFeedback]:
        """
        Keyboard path for commit(): "1".."4" map to AGAIN..EASY.

        Unbound keys are ignored (returns None); bound keys go through
        the same guards as commit().
        """
        rating = outcome_for_key(key)
        if rating is None:
            return None
        return self.commit(rating, note)

    # ---- Reflection ----

    def save_reflection(self, text: str) -> Optional[int]:
        """
        Store the end-of-session reflection.

        Blank text is skipped.
        """
        if self._state != SessionState.SESSION_COMPLETE:
            raise InvalidSessionState("Reflections are written once the session is complete")
        cleaned = text.strip()
        if not cleaned:
            return None
        return self.store.save_reflection(cleaned, session_id=self.session_id)
