"""
SQLAlchemy ORM Models for the review database

Defines ItemState, ReviewEvent and SessionReflection models.
Works with Postgres (production) and SQLite (local runs and tests).
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ItemState(Base):
    """
    Persistent scheduling state for a single item.
    """
    __tablename__ = 'item_state'

    item_id = Column(String(255), primary_key=True, nullable=False)
    deck_id = Column(String(255), nullable=False, index=True)

    # Content, opaque to the scheduler
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)

    # Scheduling fields
    easiness = Column(Float, nullable=False)
    repetitions = Column(Integer, nullable=False, default=0)
    interval = Column(Float, nullable=False)  # days, fractional while learning
    is_learning = Column(Boolean, nullable=False, default=True)
    current_learning_step = Column(Integer, nullable=False, default=0)

    # Review tracking
    last_reviewed = Column(DateTime(timezone=True), nullable=True)
    next_review_date = Column(DateTime(timezone=True), nullable=False, index=True)

    note = Column(Text, nullable=True)  # last elaboration

    def __repr__(self):
        return f"<ItemState({self.item_id}, deck={self.deck_id})>"


class ReviewEvent(Base):
    """
    One quality-history record of an item (append-only).
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(String(255), ForeignKey('item_state.item_id', ondelete='CASCADE'), nullable=False, index=True)
    deck_id = Column(String(255), nullable=False)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    quality = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 4=GOOD, 5=EASY

    # State after review
    interval = Column(Float, nullable=False)
    easiness = Column(Float, nullable=False)
    is_learning = Column(Boolean, nullable=False)

    # Session context (optional, for analytics)
    session_id = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.item_id}, quality={self.quality})>"


class SessionReflection(Base):
    """
    Free-text reflection written at the end of a review session.
    """
    __tablename__ = 'session_reflections'

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    text = Column(Text, nullable=False)
    session_type = Column(String(50), nullable=False, default='flashcards')

    def __repr__(self):
        return f"<SessionReflection(id={self.id}, session={self.session_id})>"
