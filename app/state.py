"""
Streamlit session state and database initialization helpers.
"""

from __future__ import annotations

import streamlit as st

from core import srs
from core.config import Settings, load_settings


@st.cache_resource
def get_settings() -> Settings:
    """Settings read once per server process."""
    return load_settings()


@st.cache_resource
def get_store() -> srs.SqlRecordStore:
    """
    Open the record store and create the schema (cached per process).
    """
    return srs.SqlRecordStore.from_url(get_settings().database_url)


def ensure_session_state(settings: Settings) -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "deck_id" not in st.session_state:
        st.session_state.deck_id = settings.default_deck_id
    if "review_session" not in st.session_state:
        st.session_state.review_session = None
    if "last_summary" not in st.session_state:
        st.session_state.last_summary = None
    if "reflection_saved" not in st.session_state:
        st.session_state.reflection_saved = False
