"""
Human-readable time estimates for review intervals.

Used both for post-review feedback and for the preview shown on each
rating button, so the text depends only on the interval value.
"""

from __future__ import annotations

from core.srs.constants import MINUTES_PER_DAY
from core.srs.scheduler import round_half_up


def _plural(count: int, unit: str) -> str:
    return f"1 {unit}" if count == 1 else f"{count} {unit}s"


def format_estimate(days: float) -> str:
    """
    Convert a (fractional) number of days into a coarse time bucket.

    Buckets, first match wins:
        < 0.01 day  -> minutes
        < 1 day     -> hours
        == 1        -> "1 day"
        < 7         -> days
        < 30        -> weeks
        < 365       -> months (30 days)
        otherwise   -> years

    Examples:
        >>> format_estimate(10 / 1440)
        '10 min'
        >>> format_estimate(1.0)
        '1 day'
        >>> format_estimate(3)
        '3 days'
    """
    if days < 0.01:
        minutes = max(1, round_half_up(days * MINUTES_PER_DAY))
        return f"{minutes} min"
    if days < 1:
        hours = max(1, round_half_up(days * 24))
        return _plural(hours, "hour")
    if days == 1:
        return "1 day"
    if days < 7:
        return _plural(round_half_up(days), "day")
    if days < 30:
        return _plural(round_half_up(days / 7), "week")
    if days < 365:
        return _plural(round_half_up(days / 30), "month")
    return _plural(round_half_up(days / 365), "year")
