from __future__ import annotations

import streamlit as st

from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import PROGRAM_LABELS, program_label
from data.service import get_events


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Events", "Pick a challenge, create something, and share it before the deadline.")

    options = ["all"] + list(PROGRAM_LABELS)
    category = st.radio(
        "Category",
        options,
        format_func=lambda c: "All programs" if c == "all" else program_label(c),
        horizontal=True,
    )

    with st.spinner("Loading events..."):
        res = get_events(cfg, use_mock, status="active", category=None if category == "all" else category)
    render_warnings(res)

    if res.df.empty:
        render_empty("No active events in this category right now.")
        return

    cols = st.columns(2)
    for i, event in enumerate(res.df.to_dict("records")):
        with cols[i % 2]:
            with st.container(border=True):
                st.markdown(f"#### {event.get('icon') or '⭐'} {event.get('title', '')}")
                st.caption(
                    f"{program_label(event.get('activity_category'))} · "
                    f"{event.get('start_date', '')} → {str(event.get('end_date', ''))[:10]}"
                )
                st.write(event.get("description") or "")
                if event.get("formats"):
                    st.caption(f"Formats: {event['formats']}")
                skills = event.get("skills")
                if isinstance(skills, list) and skills:
                    st.caption("Skills: " + ", ".join(skills))
