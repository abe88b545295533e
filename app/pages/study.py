"""
Study page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import (
    end_session,
    get_session,
    process_feedback,
    process_shortcut,
    reveal_answer,
    save_reflection,
    start_new_session,
)
from app.ui import (
    render_feedback_buttons,
    render_flashcard,
    render_session_complete,
    render_session_stats,
    render_shortcut_input,
)
from app.ui.flashcard_style import BACK_STYLE
from core import srs
from core.config import Settings
from core.review_session import SessionState


FEEDBACK_RENDERERS = {
    "success": st.success,
    "warning": st.warning,
    "error": st.error,
}


def render_study_page(settings: Settings) -> None:
    """
    Render the study flow (intro, active session or completion).
    """
    session = get_session()
    if session is None:
        _render_intro_screen(settings)
    elif session.is_complete:
        _render_complete_screen()
    else:
        _render_active_session()


def _render_intro_screen(settings: Settings) -> None:
    st.title("🗂️ Review")
    if settings.test_mode:
        st.warning("⚠️ **TEST MODE** - Using the test database (set TEST_MODE=false in .env for production)")

    deck_id = st.text_input("Deck", value=st.session_state.deck_id)
    st.session_state.deck_id = deck_id.strip() or settings.default_deck_id

    if st.button("Start Review", type="primary", use_container_width=True):
        start_new_session(st.session_state.deck_id)
        st.rerun()


def _render_feedback_message() -> None:
    session = get_session()
    feedback = session.last_feedback if session else None
    if feedback is None:
        return
    FEEDBACK_RENDERERS.get(feedback.tone, st.info)(feedback.text)


def _render_active_session() -> None:
    session = get_session()

    if render_session_stats(session):
        end_session()
        st.rerun()

    _render_feedback_message()
    item = session.current_item
    key_suffix = f"{session.session_id}_{session.queue.position}"

    st.markdown("<br>", unsafe_allow_html=True)

    if session.state == SessionState.AWAITING_REVEAL:
        render_flashcard(item.front, corner_text=", ".join(item.tags))
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Reveal Answer", use_container_width=True, type="primary"):
            reveal_answer()
            st.rerun()
        return

    render_flashcard(item.back, subtitle=item.front, style=BACK_STYLE)
    st.markdown("<br>", unsafe_allow_html=True)

    note = st.text_area(
        "Note (optional)",
        value=item.note or "",
        key=f"note_{key_suffix}",
        placeholder="Mnemonic, example, anything that helps next time",
    )

    busy = session.is_busy
    rating = render_feedback_buttons(session.preview_all(note), key_suffix=key_suffix, disabled=busy)
    if rating is not None:
        if process_feedback(rating, note) is not None:
            st.rerun()

    # runs as a widget callback, before the next rerun renders
    render_shortcut_input(
        key_suffix,
        lambda key: process_shortcut(key, st.session_state.get(f"note_{key_suffix}")),
        disabled=busy,
    )

    if session.last_error:
        st.caption(session.last_error)
    if srs.is_test_mode():
        st.caption("TEST MODE - Using the test database")


def _render_complete_screen() -> None:
    session = get_session()
    _render_feedback_message()
    render_session_complete(session.summary)

    if session.summary.reviewed_count > 0:
        st.markdown("### Reflection")
        if st.session_state.reflection_saved:
            st.caption("Reflection saved.")
        else:
            with st.form(f"reflection_{session.session_id}"):
                text = st.text_area("What stuck? What didn't?")
                if st.form_submit_button("Save reflection") and save_reflection(text):
                    st.rerun()

    if st.button("Back", use_container_width=True):
        end_session()
        st.rerun()
