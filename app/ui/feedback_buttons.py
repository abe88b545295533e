"""
Feedback Button UI

Renders the four rating buttons, each labelled with its previewed interval,
plus the keyboard shortcut field.
"""

from __future__ import annotations

from typing import Callable, Optional

import streamlit as st
from core import srs


BUTTON_LABELS = {
    srs.ReviewOutcome.AGAIN: "❌ Again",
    srs.ReviewOutcome.HARD: "😰 Hard",
    srs.ReviewOutcome.GOOD: "👍 Good",
    srs.ReviewOutcome.EASY: "✨ Easy",
}


def render_feedback_buttons(
    previews: dict[srs.ReviewOutcome, str],
    key_suffix: str,
    disabled: bool = False
) -> Optional[srs.ReviewOutcome]:
    """
    Render rating buttons.

    Args:
        previews: Formatted interval per outcome (from ReviewSession.preview_all)
        key_suffix: Unique suffix so widgets reset between items
        disabled: Disable all buttons (commit in flight)

    Returns:
        ReviewOutcome selected by user, or None if no button clicked
    """
    st.markdown("**How well did you remember this?**")

    columns = st.columns(len(srs.OUTCOME_ORDER))
    for column, outcome in zip(columns, srs.OUTCOME_ORDER):
        with column:
            label = f"{BUTTON_LABELS[outcome]}\n\n{previews.get(outcome, '')}"
            if st.button(
                label,
                key=f"rate_{outcome.value}_{key_suffix}",
                use_container_width=True,
                disabled=disabled,
            ):
                return outcome
    return None


def render_shortcut_input(
    key_suffix: str,
    on_key: Callable[[str], None],
    disabled: bool = False
) -> None:
    """
    Keyboard path: type 1-4 and press Enter.

    The typed key is handed to on_key once and the field is cleared, so a
    failed save is never resubmitted by a later rerun.
    """
    key = f"shortcut_{key_suffix}"

    def _submit() -> None:
        value = st.session_state.get(key, "")
        st.session_state[key] = ""
        if value:
            on_key(value)

    st.text_input(
        "Shortcut (1 Again · 2 Hard · 3 Good · 4 Easy)",
        key=key,
        max_chars=1,
        disabled=disabled,
        on_change=_submit,
    )
