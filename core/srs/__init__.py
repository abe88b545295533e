"""
SRS - Spaced Repetition Scheduler

Main API for the review core.

This package implements an SM-2 style scheduler with Anki-like learning
steps:
- New and lapsed items climb a ladder of short learning steps (1m, 10m)
- Graduated items grow their interval by a per-item easiness factor
- Failures (AGAIN and HARD) restart the ladder; mature lapses cost easiness

Quick start:
    from core import srs

    # Open the record store
    store = srs.SqlRecordStore.from_url()

    # Process a review (algorithm only, no DB calls)
    new_state = srs.apply_review(state, srs.ReviewOutcome.GOOD)

    # Human-readable interval
    srs.format_estimate(new_state.interval)
"""

# Core scheduler API (algorithm logic)
from core.srs.scheduler import apply_review, quality_for

# Formatting and feedback
from core.srs.time_estimate import format_estimate
from core.srs.feedback import ReviewFeedback, build_feedback

# Reminder planning
from core.srs.reminders import ReviewReminder, optimal_review_windows, plan_review_reminders

# Database API
from core.srs.database import (
    RecordStore,
    SqlRecordStore,
    get_database_url,
    get_engine,
    is_test_mode,
)

# Constants and parameters
from core.srs.constants import (
    DEFAULT_DECK_ID,
    DEFAULT_LADDER,
    INITIAL_EASINESS,
    KEY_BINDINGS,
    MIN_EASINESS,
    OUTCOME_ORDER,
    QUALITY_BY_OUTCOME,
    LearningLadder,
    ReviewOutcome,
    outcome_for_key,
)

# Memory state
from core.srs.memory_state import (
    ItemMemoryState,
    QualityRecord,
    initialize_new_item,
    new_item_id,
)

# Errors
from core.srs.errors import (
    InvalidRating,
    InvalidSessionState,
    ItemNotFound,
    PersistenceFailure,
    ReviewError,
    SessionBusy,
    StaleItemState,
)


__all__ = [
    # Core algorithm
    "apply_review",
    "quality_for",

    # Formatting
    "format_estimate",
    "ReviewFeedback",
    "build_feedback",

    # Reminders
    "ReviewReminder",
    "optimal_review_windows",
    "plan_review_reminders",

    # Database operations
    "RecordStore",
    "SqlRecordStore",
    "get_database_url",
    "get_engine",
    "is_test_mode",

    # Enums and ladder
    "ReviewOutcome",
    "LearningLadder",
    "outcome_for_key",

    # Memory state
    "ItemMemoryState",
    "QualityRecord",
    "initialize_new_item",
    "new_item_id",

    # Errors
    "ReviewError",
    "InvalidRating",
    "InvalidSessionState",
    "ItemNotFound",
    "PersistenceFailure",
    "SessionBusy",
    "StaleItemState",

    # Parameters
    "DEFAULT_DECK_ID",
    "DEFAULT_LADDER",
    "INITIAL_EASINESS",
    "KEY_BINDINGS",
    "MIN_EASINESS",
    "OUTCOME_ORDER",
    "QUALITY_BY_OUTCOME",
]
