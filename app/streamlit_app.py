"""
Spaced Repetition Review - Main App

Streamlit UI for the review scheduler.

Run:
    streamlit run app/streamlit_app.py
"""

import streamlit as st

from app.router import PAGES
from app.state import ensure_session_state, get_settings, get_store
from core.config import configure_logging


# ---- Page Setup ----

st.set_page_config(
    page_title="Spaced Repetition Review",
    page_icon="🗂️",
    layout="centered"
)


# ---- Main App ----

def main():
    """Main app entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)
    get_store()  # creates the schema on first run
    ensure_session_state(settings)

    tabs = st.tabs([page.title for page in PAGES])
    for tab, page in zip(tabs, PAGES):
        with tab:
            page.render(settings)


if __name__ == "__main__":
    main()
