from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from components.narrative import render_empty, render_warnings
from config import AppConfig
from data.aggregations import PROGRAM_LABELS
from data.service import get_events_by_month, get_leaderboard

PROGRAMS = [
    ("express", "🎨", "Share drawings, stories, music and videos. Every month brings a new theme to create around."),
    ("challenge", "🏅", "Monthly competitions with prizes, certificates and a spot on the winners wall."),
    ("brainy", "💡", "Bite-sized videos and articles that make science, maths and the world fun to explore."),
]


def _event_of_the_month(events) -> dict | None:
    if events.empty:
        return None
    active = events[events["status"] == "active"] if "status" in events.columns else events
    pick = active if not active.empty else events
    return pick.iloc[0].to_dict()


def _xp(value) -> int:
    xp = pd.to_numeric(value, errors="coerce")
    return 0 if pd.isna(xp) else int(xp)


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.markdown(
        """
<div class="hero">
  <div class="hero-title">Where young creators shine</div>
  <p class="hero-narrative">
    Join monthly events, share what you make, and collect XP for every skill you grow.<br/>
    Open to every child with a story to tell, a picture to paint or a question to ask.
  </p>
</div>
        """,
        unsafe_allow_html=True,
    )

    # --- Programs ---
    st.markdown('<div class="section-title">Our programs</div>', unsafe_allow_html=True)
    cols = st.columns(len(PROGRAMS))
    for col, (key, icon, body) in zip(cols, PROGRAMS):
        with col:
            st.markdown(
                f"""
<div class="program-card">
  <div class="program-card-icon">{icon}</div>
  <div class="program-card-title">{PROGRAM_LABELS[key]}</div>
  <div class="program-card-body">{body}</div>
</div>
                """,
                unsafe_allow_html=True,
            )

    left, right = st.columns([3, 2])

    with st.spinner("Loading this month's highlights..."):
        events = get_events_by_month(cfg, use_mock, date.today().strftime("%Y-%m"))
        leaders = get_leaderboard(cfg, use_mock, limit=10)
    render_warnings(events, leaders)

    with left:
        st.markdown('<div class="section-title">Event of the month</div>', unsafe_allow_html=True)
        event = _event_of_the_month(events.df)
        if event is None:
            render_empty("No events scheduled this month yet. Check back soon!")
        else:
            st.markdown(f"### {event.get('icon') or '⭐'} {event.get('title', '')}")
            st.write(event.get("description") or "")
            st.caption(f"{event.get('start_date', '')} → {str(event.get('end_date', ''))[:10]}")
            skills = event.get("skills")
            if isinstance(skills, list) and skills:
                st.caption("Skills: " + ", ".join(skills))

    with right:
        st.markdown('<div class="section-title">XP leaderboard</div>', unsafe_allow_html=True)
        if leaders.df.empty:
            render_empty("The leaderboard is empty.")
        for rank, row in enumerate(leaders.df.to_dict("records"), start=1):
            st.markdown(
                f"""
<div class="leader-row">
  <span class="leader-rank">#{rank}</span>
  <span class="leader-name">{row.get('full_name') or 'Anonymous'}</span>
  <span class="leader-xp">{_xp(row.get('xp'))} XP</span>
</div>
                """,
                unsafe_allow_html=True,
            )
