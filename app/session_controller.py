"""
Session lifecycle helpers for Streamlit app.

The ReviewSession object lives in st.session_state and owns all review
state; these helpers only translate UI events into session calls.
"""

from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from app.state import get_settings, get_store
from core import srs
from core.review_session import ReviewSession, SessionSummary

logger = logging.getLogger(__name__)


def get_session() -> Optional[ReviewSession]:
    return st.session_state.get("review_session")


def _remember_summary(summary: SessionSummary) -> None:
    st.session_state.last_summary = summary
    st.session_state.reflection_saved = False


def start_new_session(deck_id: str) -> None:
    """
    Start a new review session for a deck.
    """
    session = ReviewSession(
        get_store(),
        deck_id=deck_id,
        ladder=get_settings().ladder,
    )
    session.on_session_complete(_remember_summary)

    try:
        session.start()
    except srs.ReviewError as exc:
        logger.exception("Could not start session for deck %s", deck_id)
        st.error(f"Error creating session: {exc}")
        return

    st.session_state.review_session = session


def reveal_answer() -> None:
    session = get_session()
    if session is None:
        return
    try:
        session.reveal()
    except srs.InvalidSessionState as exc:
        logger.debug("Ignoring reveal: %s", exc)


def process_feedback(rating: srs.ReviewOutcome, note: Optional[str] = None) -> Optional[srs.ReviewFeedback]:
    """
    Commit the rating for the current item and move to the next one.

    A failed write leaves the session on the same item; the error is shown
    and the learner can retry.
    """
    session = get_session()
    if session is None:
        return None
    try:
        return session.commit(rating, note)
    except srs.SessionBusy:
        st.info("Still saving the previous review...")
    except srs.PersistenceFailure as exc:
        st.error(f"Could not save review, please try again. ({exc})")
    return None


def process_shortcut(key: str, note: Optional[str] = None) -> Optional[srs.ReviewFeedback]:
    """Keyboard path: "1".."4" rate the item, anything else is ignored."""
    rating = srs.outcome_for_key(key.strip())
    if rating is None:
        return None
    return process_feedback(rating, note)


def save_reflection(text: str) -> bool:
    """
    Save the reflection for the finished session.

    Returns:
        True if something was stored
    """
    session = get_session()
    if session is None or not session.is_complete:
        return False
    try:
        saved = session.save_reflection(text) is not None
    except srs.PersistenceFailure as exc:
        st.error(f"Could not save reflection: {exc}")
        return False
    st.session_state.reflection_saved = saved
    return saved


def end_session() -> None:
    """
    Leave the current session (already committed reviews stay saved).
    """
    session = get_session()
    if session is not None:
        session.abandon()
    st.session_state.review_session = None
