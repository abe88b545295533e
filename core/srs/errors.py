"""
Errors raised by the review core.

The engine and formatter only ever raise InvalidRating; everything else
comes from the I/O boundary (record store) or session misuse.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for review core errors."""


class InvalidRating(ReviewError, ValueError):
    """Quality number outside the 0-5 scale."""

    def __init__(self, quality: object):
        super().__init__(f"Quality must be between 0 and 5, got {quality!r}")
        self.quality = quality


class PersistenceFailure(ReviewError):
    """The record store could not persist an item."""


class StaleItemState(PersistenceFailure):
    """The persisted item changed since it was loaded into the session."""


class ItemNotFound(ReviewError, KeyError):
    """No item stored under the requested id."""

    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Item not found: {self.item_id}"


class InvalidSessionState(ReviewError):
    """Operation not allowed in the session's current state."""


class SessionBusy(InvalidSessionState):
    """A commit is still in flight."""
