"""
Analytics package exports.
"""

from core.analytics.constants import QUALITY_LABELS
from core.analytics.service import build_deck_dashboard
from core.analytics.types import DeckDashboardData

__all__ = [
    "QUALITY_LABELS",
    "build_deck_dashboard",
    "DeckDashboardData",
]
