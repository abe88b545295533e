"""
Analytics page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.state import get_store
from core.analytics import QUALITY_LABELS, build_deck_dashboard
from core.config import Settings


@st.cache_data(show_spinner=False, ttl=60)
def _cached_dashboard(deck_id: str):
    return build_deck_dashboard(get_store(), deck_id=deck_id)


def render_analytics_page(settings: Settings) -> None:
    del settings

    st.subheader("Review Analytics")
    deck_id = st.session_state.deck_id
    st.caption(f"Deck: {deck_id}")

    if st.button("Refresh Analytics", use_container_width=False):
        _cached_dashboard.clear()
        st.rerun()

    dashboard = _cached_dashboard(deck_id)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Items", f"{dashboard.total_items:,}")
    with col2:
        st.metric("Due Now", f"{dashboard.due_items:,}")
    with col3:
        st.metric("Learning / Mature", f"{dashboard.learning_items} / {dashboard.mature_items}")
    with col4:
        if dashboard.retention_rate is None:
            st.metric("Retention", "-")
        else:
            st.metric("Retention", f"{dashboard.retention_rate * 100:.0f}%", help="Share of reviews not rated Again")

    st.markdown("### Reviews Per Day")
    if dashboard.reviews_daily.empty:
        st.info("No reviews yet for this deck.")
        return
    st.bar_chart(dashboard.reviews_daily.rename("reviews").to_frame())

    st.markdown("### Retention Over Time")
    st.line_chart(dashboard.retention_daily.rename("retention").to_frame())

    st.markdown("### Ratings")
    distribution = dashboard.rating_distribution.rename(index=QUALITY_LABELS)
    st.bar_chart(distribution.rename("reviews").to_frame())
