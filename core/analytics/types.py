"""
Types for analytics dashboards.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class DeckDashboardData:
    """
    Precomputed metrics and series for one deck.
    """
    deck_id: str
    total_items: int
    learning_items: int
    mature_items: int
    due_items: int
    reviews_total: int
    retention_rate: float | None
    average_easiness: float | None
    reviews_daily: pd.Series
    retention_daily: pd.Series
    rating_distribution: pd.Series
