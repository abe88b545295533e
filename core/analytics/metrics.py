"""
Metric computations for analytics dashboards.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from core.analytics.constants import QUALITY_LABELS, RETAINED_MIN_QUALITY


def build_day_index(events_df: pd.DataFrame) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index spanning the event range.
    """
    if events_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    start = events_df["day_utc"].min()
    end = events_df["day_utc"].max()
    return pd.date_range(start=start, end=end, freq="D")


def compute_reviews_daily(events_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Number of reviews per day (zero-filled).
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")
    counts = events_df.groupby("day_utc").size()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def compute_retention_rate(events_df: pd.DataFrame) -> float | None:
    """
    Share of reviews rated at or above the passing quality.
    """
    if events_df.empty:
        return None
    return float((events_df["quality"] >= RETAINED_MIN_QUALITY).mean())


def compute_retention_daily(events_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Daily retention rate; days without reviews are left out.
    """
    if events_df.empty or len(day_index) == 0:
        return pd.Series(dtype="float64")
    retained = events_df["quality"] >= RETAINED_MIN_QUALITY
    daily = retained.groupby(events_df["day_utc"]).mean()
    return daily.reindex(day_index).dropna().astype("float64")


def compute_rating_distribution(events_df: pd.DataFrame) -> pd.Series:
    """
    Count of reviews per rating label (Again, Hard, Good, Easy).
    """
    labels = list(QUALITY_LABELS.values())
    if events_df.empty:
        return pd.Series(0, index=labels, dtype="int64")
    counts = events_df["quality"].map(QUALITY_LABELS).value_counts()
    return counts.reindex(labels, fill_value=0).astype("int64")


def compute_phase_counts(snapshots_df: pd.DataFrame, now: datetime) -> dict[str, int]:
    """
    Learning, mature and due item counts from current snapshots.
    """
    if snapshots_df.empty:
        return {"learning": 0, "mature": 0, "due": 0}

    learning = int(snapshots_df["is_learning"].sum())
    due = int((snapshots_df["next_review_date"] <= pd.Timestamp(now)).sum())
    return {
        "learning": learning,
        "mature": int(len(snapshots_df) - learning),
        "due": due,
    }
