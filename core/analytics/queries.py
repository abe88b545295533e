"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

import pandas as pd

from core.analytics.constants import EVENT_COLUMNS, SNAPSHOT_COLUMNS
from core.srs.database import SqlRecordStore


def load_review_events_df(store: SqlRecordStore, deck_id: str | None = None) -> pd.DataFrame:
    """
    Load review events (optionally for one deck) into a dataframe.
    """
    rows = store.review_events(deck_id=deck_id)
    if not rows:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(rows)
    df = df[[col for col in EVENT_COLUMNS if col != "day_utc"]].copy()
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df = df.dropna(subset=["item_id", "timestamp"])
    df["day_utc"] = df["timestamp"].dt.floor("D")
    df = df.sort_values("timestamp").reset_index(drop=True)
    return df


def load_item_snapshots_df(store: SqlRecordStore, deck_id: str | None = None) -> pd.DataFrame:
    """
    Load current item scheduling state into a dataframe.
    """
    items = store.all_items(deck_id=deck_id)
    if not items:
        return pd.DataFrame(columns=SNAPSHOT_COLUMNS)

    df = pd.DataFrame(
        [
            {
                "item_id": item.item_id,
                "deck_id": item.deck_id,
                "is_learning": item.in_learning_phase,
                "repetitions": item.repetitions,
                "interval": item.interval,
                "easiness": item.easiness,
                "next_review_date": item.next_review_date,
            }
            for item in items
        ]
    )
    df["next_review_date"] = pd.to_datetime(df["next_review_date"], utc=True)
    return df
