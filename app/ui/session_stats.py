"""
Session Statistics UI

Renders progress metrics and controls.
"""

import streamlit as st

from core.review_session import ReviewSession, SessionSummary


def render_session_stats(session: ReviewSession) -> bool:
    """
    Render session progress metrics and exit button.

    Returns:
        True if quit button was clicked, False otherwise
    """
    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        st.metric("Progress", f"{session.queue.position}/{session.queue.total}")

    with col2:
        st.metric("Reviewed", session.reviewed_count)

    with col3:
        if session.reviewed_count > 0:
            accuracy = session.correct_count / session.reviewed_count * 100
            st.metric("Accuracy", f"{accuracy:.0f}%")

    with col4:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("❌", help="Quit session", use_container_width=True):
            return True

    st.divider()
    return False


def render_session_complete(summary: SessionSummary):
    """Render session completion message."""
    if summary.reviewed_count == 0:
        st.info("All caught up! No items are due in this deck.")
        return
    st.success(f"🎉 Session complete! You reviewed {summary.reviewed_count} items.")
    if summary.accuracy is not None:
        st.info(f"Accuracy: {summary.accuracy * 100:.1f}%")
