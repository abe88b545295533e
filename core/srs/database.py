"""
Database - Record Store for Item State

Handles all database operations for item state, review history and
session reflections. Uses SQLAlchemy ORM (Postgres in production,
SQLite for local runs and tests).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations
import logging
import os
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Protocol

from sqlalchemy import create_engine, func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.srs.errors import ItemNotFound, PersistenceFailure, StaleItemState
from core.srs.memory_state import ItemMemoryState, QualityRecord, ensure_utc
from core.srs.models import (
    Base,
    ItemState as ItemStateModel,
    ReviewEvent as ReviewEventModel,
    SessionReflection as SessionReflectionModel,
)

logger = logging.getLogger(__name__)

DB_DIR = Path(__file__).parent.parent.parent / "logs"

# Sentinel: skip the optimistic last_reviewed check in put()
UNCHECKED = object()


# Database configuration
def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the database URL from environment variables.

    Falls back to a local SQLite file when DATABASE_URL is not set.
    In test mode the database name gets a "test_" prefix
    (review_db -> test_review_db, review.db -> test_review.db).

    Returns:
        SQLAlchemy database URL
    """
    base_url = os.getenv("DATABASE_URL") or f"sqlite:///{DB_DIR / 'review.db'}"

    if is_test_mode():
        return (
            base_url
            .replace("/review_db", "/test_review_db")
            .replace("review.db", "test_review.db")
        )

    return base_url


def get_engine(db_url: Optional[str] = None) -> Engine:
    """
    Get SQLAlchemy engine for database connection.

    Server databases use connection pooling; in-memory SQLite shares one
    connection so every session sees the same data.

    Args:
        db_url: Database URL (defaults to get_database_url())

    Returns:
        SQLAlchemy Engine instance
    """
    db_url = db_url or get_database_url()

    if db_url.startswith("sqlite"):
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                db_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=False
            )
        DB_DIR.mkdir(exist_ok=True)
        return create_engine(db_url, echo=False)

    return create_engine(
        db_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


class RecordStore(Protocol):
    """Key-indexed persistence used by review sessions."""

    def get(self, item_id: str) -> ItemMemoryState:
        ...

    def put(
        self,
        item_id: str,
        state: ItemMemoryState,
        expected_last_reviewed: object = UNCHECKED,
        session_id: Optional[str] = None
    ) -> None:
        ...

    def query_due(self, deck_id: str, now: datetime) -> list[ItemMemoryState]:
        ...

    def save_reflection(self, text: str, session_id: Optional[str] = None) -> int:
        ...


def _to_state(row: ItemStateModel, events: Iterable[ReviewEventModel]) -> ItemMemoryState:
    history = tuple(
        QualityRecord(
            timestamp=ensure_utc(event.timestamp),
            quality=event.quality,
            interval=event.interval,
            easiness=event.easiness,
            is_learning=event.is_learning,
        )
        for event in events
    )
    return ItemMemoryState(
        item_id=row.item_id,
        deck_id=row.deck_id,
        front=row.front,
        back=row.back,
        tags=tuple(row.tags or ()),
        easiness=row.easiness,
        repetitions=row.repetitions,
        interval=row.interval,
        is_learning=row.is_learning,
        current_learning_step=row.current_learning_step,
        last_reviewed=ensure_utc(row.last_reviewed),
        next_review_date=ensure_utc(row.next_review_date),
        quality_history=history,
        note=row.note,
    )


def _apply_state(row: ItemStateModel, state: ItemMemoryState) -> None:
    row.deck_id = state.deck_id
    row.front = state.front
    row.back = state.back
    row.tags = list(state.tags)
    row.easiness = state.easiness
    row.repetitions = state.repetitions
    row.interval = state.interval
    row.is_learning = state.is_learning
    row.current_learning_step = state.current_learning_step
    row.last_reviewed = ensure_utc(state.last_reviewed)
    row.next_review_date = ensure_utc(state.next_review_date)
    row.note = state.note


def _event_row(
    state: ItemMemoryState,
    record: QualityRecord,
    session_id: Optional[str]
) -> ReviewEventModel:
    return ReviewEventModel(
        item_id=state.item_id,
        deck_id=state.deck_id,
        timestamp=ensure_utc(record.timestamp),
        quality=record.quality,
        interval=record.interval,
        easiness=record.easiness,
        is_learning=record.is_learning,
        session_id=session_id,
    )


class SqlRecordStore:
    """
    SQLAlchemy-backed record store.

    Each put() writes the scheduling fields and appends the new history
    rows in a single transaction.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, db_url: Optional[str] = None) -> "SqlRecordStore":
        store = cls(get_engine(db_url))
        store.init_db()
        return store

    def _session(self) -> Session:
        return self._session_factory()

    def init_db(self) -> None:
        """
        Create tables if they don't exist.

        Safe to call multiple times.
        """
        Base.metadata.create_all(self.engine)

    def reset_db(self) -> None:
        """
        DANGEROUS: Delete all data and recreate tables.

        All review history will be lost!
        """
        Base.metadata.drop_all(self.engine)
        logger.warning("All review tables dropped (%s)", self.engine.url)
        self.init_db()

    def _load_states(self, session: Session, rows: list[ItemStateModel]) -> list[ItemMemoryState]:
        if not rows:
            return []

        events_by_item: dict[str, list[ReviewEventModel]] = defaultdict(list)
        events = session.query(ReviewEventModel).filter(
            ReviewEventModel.item_id.in_([row.item_id for row in rows])
        ).order_by(ReviewEventModel.id).all()
        for event in events:
            events_by_item[event.item_id].append(event)

        return [_to_state(row, events_by_item[row.item_id]) for row in rows]

    def get(self, item_id: str) -> ItemMemoryState:
        """
        Load one item with its full review history.

        Raises:
            ItemNotFound: no item stored under item_id
        """
        session = self._session()
        try:
            row = session.get(ItemStateModel, item_id)
            if row is None:
                raise ItemNotFound(item_id)
            return self._load_states(session, [row])[0]
        finally:
            session.close()

    def add_item(self, state: ItemMemoryState) -> None:
        """
        Insert a new item.

        Raises:
            PersistenceFailure: duplicate id or database error
        """
        session = self._session()
        try:
            row = ItemStateModel(item_id=state.item_id)
            _apply_state(row, state)
            session.add(row)
            for record in state.quality_history:
                session.add(_event_row(state, record, None))
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise PersistenceFailure(f"Item already exists: {state.item_id}") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to add item %s: %s", state.item_id, exc)
            raise PersistenceFailure(f"Could not add item {state.item_id}") from exc
        finally:
            session.close()

    def put(
        self,
        item_id: str,
        state: ItemMemoryState,
        expected_last_reviewed: object = UNCHECKED,
        session_id: Optional[str] = None
    ) -> None:
        """
        Save item state (insert or update) and append new history rows.

        Args:
            item_id: Key of the item being written
            state: New state, as returned by the scheduler
            expected_last_reviewed: last_reviewed the caller loaded; when
                given, the write is rejected if the stored value differs
            session_id: Review session tagged on the appended history rows

        Raises:
            StaleItemState: stored item changed since it was loaded
            PersistenceFailure: any database error (nothing is written)
        """
        if state.item_id != item_id:
            raise ValueError(f"State for {state.item_id} cannot be stored under {item_id}")

        session = self._session()
        try:
            row = session.get(ItemStateModel, item_id)
            stored_events = 0

            if row is None:
                row = ItemStateModel(item_id=item_id)
                session.add(row)
            else:
                if expected_last_reviewed is not UNCHECKED:
                    stored = ensure_utc(row.last_reviewed)
                    if stored != ensure_utc(expected_last_reviewed):
                        raise StaleItemState(
                            f"Item {item_id} was reviewed elsewhere at {stored}"
                        )
                stored_events = session.query(func.count(ReviewEventModel.id)).filter(
                    ReviewEventModel.item_id == item_id
                ).scalar() or 0

            if stored_events > len(state.quality_history):
                raise StaleItemState(
                    f"Item {item_id} has {stored_events} stored reviews, "
                    f"state carries {len(state.quality_history)}"
                )

            _apply_state(row, state)
            for record in state.quality_history[stored_events:]:
                session.add(_event_row(state, record, session_id))

            session.commit()
        except StaleItemState:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to save item %s: %s", item_id, exc)
            raise PersistenceFailure(f"Could not save item {item_id}") from exc
        finally:
            session.close()

    def query_due(self, deck_id: str, now: datetime) -> list[ItemMemoryState]:
        """
        Get items of a deck whose next review date is at or before now.

        Returns:
            Due items, unordered (the review queue sorts them)
        """
        session = self._session()
        try:
            rows = session.query(ItemStateModel).filter(
                ItemStateModel.deck_id == deck_id,
                ItemStateModel.next_review_date <= ensure_utc(now)
            ).all()
            return self._load_states(session, rows)
        finally:
            session.close()

    def all_items(self, deck_id: Optional[str] = None) -> list[ItemMemoryState]:
        """Get every item, optionally scoped to one deck."""
        session = self._session()
        try:
            query = session.query(ItemStateModel)
            if deck_id is not None:
                query = query.filter(ItemStateModel.deck_id == deck_id)
            rows = query.order_by(ItemStateModel.item_id).all()
            return self._load_states(session, rows)
        finally:
            session.close()

    def delete_item(self, item_id: str) -> None:
        """Delete an item and its history."""
        session = self._session()
        try:
            session.query(ReviewEventModel).filter(
                ReviewEventModel.item_id == item_id
            ).delete(synchronize_session=False)
            deleted = session.query(ItemStateModel).filter(
                ItemStateModel.item_id == item_id
            ).delete(synchronize_session=False)
            if not deleted:
                session.rollback()
                raise ItemNotFound(item_id)
            session.commit()
        finally:
            session.close()

    def review_events(
        self,
        deck_id: Optional[str] = None,
        since: Optional[datetime] = None
    ) -> list[dict]:
        """
        Get review history rows (oldest first), for analytics.

        Args:
            deck_id: Only events of this deck
            since: Only events at or after this time

        Returns:
            List of event dicts
        """
        session = self._session()
        try:
            query = session.query(ReviewEventModel)
            if deck_id is not None:
                query = query.filter(ReviewEventModel.deck_id == deck_id)
            if since is not None:
                query = query.filter(ReviewEventModel.timestamp >= ensure_utc(since))
            events = query.order_by(ReviewEventModel.timestamp, ReviewEventModel.id).all()

            return [
                {
                    "id": event.id,
                    "item_id": event.item_id,
                    "deck_id": event.deck_id,
                    "timestamp": ensure_utc(event.timestamp),
                    "quality": event.quality,
                    "interval": event.interval,
                    "easiness": event.easiness,
                    "is_learning": event.is_learning,
                    "session_id": event.session_id,
                }
                for event in events
            ]
        finally:
            session.close()

    def save_reflection(
        self,
        text: str,
        session_id: Optional[str] = None,
        now: Optional[datetime] = None,
        session_type: str = "flashcards"
    ) -> int:
        """
        Store an end-of-session reflection.

        Returns:
            Id of the new reflection row
        """
        created_at = ensure_utc(now) or datetime.now(timezone.utc)
        session = self._session()
        try:
            reflection = SessionReflectionModel(
                session_id=session_id,
                created_at=created_at,
                text=text,
                session_type=session_type,
            )
            session.add(reflection)
            session.commit()
            return reflection.id
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to save reflection for session %s: %s", session_id, exc)
            raise PersistenceFailure("Could not save session reflection") from exc
        finally:
            session.close()

    def reflections(self, limit: int = 20) -> list[dict]:
        """Get recent reflections (newest first)."""
        session = self._session()
        try:
            rows = session.query(SessionReflectionModel).order_by(
                SessionReflectionModel.created_at.desc(),
                SessionReflectionModel.id.desc()
            ).limit(limit).all()
            return [
                {
                    "id": row.id,
                    "session_id": row.session_id,
                    "created_at": ensure_utc(row.created_at),
                    "text": row.text,
                    "session_type": row.session_type,
                }
                for row in rows
            ]
        finally:
            session.close()
