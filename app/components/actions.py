"""
Shared widgets for admin row actions (status badges, two-step delete,
reporting write results).
"""

from __future__ import annotations

import streamlit as st

from config import THEME
from data.service import ActionResult

STATUS_COLORS = {
    "pending": THEME["warning"],
    "confirmed": THEME["success"],
    "approved": THEME["success"],
    "paid": "#175CD3",
    "active": THEME["success"],
    "upcoming": "#6941C6",
    "completed": "#475467",
    "published": THEME["success"],
    "draft": "#475467",
    "rejected": THEME["danger"],
}


def status_badge(status: str | None) -> str:
    status = status or "pending"
    color = STATUS_COLORS.get(status, "#475467")
    return f'<span class="badge" style="color:{color}; border-color:{color};">{status}</span>'


def report(result: ActionResult) -> None:
    """Show the outcome; on success rerun so the page refetches."""
    if result.ok:
        st.session_state["flash"] = result.message
        st.rerun()
    if result.message:
        st.warning(result.message)
    st.error(result.error or "Action failed")


def show_flash() -> None:
    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)


def confirm_delete(key: str, label: str = "Delete") -> bool:
    """
    Two-step delete: first click arms, second click confirms.

    Returns True exactly once, on the confirming click.
    """
    armed_key = f"confirm_{key}"
    if not st.session_state.get(armed_key):
        if st.button(f"🗑️ {label}", key=f"arm_{key}"):
            st.session_state[armed_key] = True
            st.rerun()
        return False

    st.caption("Are you sure? This cannot be undone.")
    c1, c2 = st.columns(2)
    confirmed = c1.button("Yes, delete", key=f"yes_{key}")
    cancelled = c2.button("Cancel", key=f"no_{key}")
    if confirmed or cancelled:
        st.session_state.pop(armed_key, None)
    if cancelled:
        st.rerun()
    return confirmed
