"""
Item management page: add items and browse the deck.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from app.state import get_store
from core import srs
from core.config import Settings
from core.srs.time_estimate import format_estimate


def _parse_tags(raw: str) -> tuple[str, ...]:
    return tuple(tag.strip() for tag in raw.split(",") if tag.strip())


def render_items_page(settings: Settings) -> None:
    del settings

    deck_id = st.session_state.deck_id
    store = get_store()

    st.subheader(f"Items in {deck_id}")

    with st.form("add_item", clear_on_submit=True):
        front = st.text_input("Front")
        back = st.text_area("Back")
        tags = st.text_input("Tags (comma-separated)")
        submitted = st.form_submit_button("Add item", type="primary")

    if submitted:
        if not front.strip() or not back.strip():
            st.warning("Front and back are both required.")
        else:
            item = srs.initialize_new_item(
                item_id=srs.new_item_id(),
                front=front.strip(),
                back=back.strip(),
                deck_id=deck_id,
                tags=_parse_tags(tags),
            )
            try:
                store.add_item(item)
            except srs.PersistenceFailure as exc:
                st.error(f"Could not add item: {exc}")
            else:
                st.success(f"Added '{item.front}'")

    items = store.all_items(deck_id=deck_id)
    if not items:
        st.info("No items in this deck yet.")
        return

    rows = [
        {
            "Front": item.front,
            "Back": item.back,
            "Phase": "learning" if item.in_learning_phase else "mature",
            "Interval": format_estimate(item.interval),
            "Easiness": round(item.easiness, 2),
            "Next review": item.next_review_date,
        }
        for item in items
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
