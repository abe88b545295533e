"""
Service layer to assemble analytics dashboards per deck.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core.analytics.metrics import (
    build_day_index,
    compute_phase_counts,
    compute_rating_distribution,
    compute_retention_daily,
    compute_retention_rate,
    compute_reviews_daily,
)
from core.analytics.queries import (
    load_item_snapshots_df,
    load_review_events_df,
)
from core.analytics.types import DeckDashboardData
from core.srs.database import SqlRecordStore


def build_deck_dashboard(
    store: SqlRecordStore,
    deck_id: str,
    now: datetime | None = None
) -> DeckDashboardData:
    """
    Build all KPI values and series needed by the analytics page for a deck.
    """
    now = now or datetime.now(timezone.utc)
    events_df = load_review_events_df(store, deck_id=deck_id)
    snapshots_df = load_item_snapshots_df(store, deck_id=deck_id)
    day_index = build_day_index(events_df)
    phases = compute_phase_counts(snapshots_df, now)

    average_easiness = None
    if not snapshots_df.empty:
        average_easiness = float(snapshots_df["easiness"].mean())

    return DeckDashboardData(
        deck_id=deck_id,
        total_items=int(len(snapshots_df)),
        learning_items=phases["learning"],
        mature_items=phases["mature"],
        due_items=phases["due"],
        reviews_total=int(len(events_df)),
        retention_rate=compute_retention_rate(events_df),
        average_easiness=average_easiness,
        reviews_daily=compute_reviews_daily(events_df, day_index),
        retention_daily=compute_retention_daily(events_df, day_index),
        rating_distribution=compute_rating_distribution(events_df),
    )
