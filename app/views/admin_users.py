from __future__ import annotations

import streamlit as st

from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import search_rows
from data.service import get_profiles

COLUMNS = {
    "full_name": "Name",
    "email": "Email",
    "role": "Role",
    "school_name": "School",
    "phone_number": "Phone",
    "xp": "XP",
    "created_at": "Joined",
}


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Users", "Everyone registered on the platform.")

    term = st.text_input("Search", placeholder="Name, email or school")

    with st.spinner("Loading users..."):
        res = get_profiles(cfg, use_mock)
    render_warnings(res)

    df = search_rows(res.df, term, ["full_name", "email", "school_name"])
    if df.empty:
        render_empty("No users match." if term else "No users yet.")
        return

    st.caption(f"{len(df)} user(s)")
    cols = [c for c in COLUMNS if c in df.columns]
    st.dataframe(df[cols].rename(columns=COLUMNS), use_container_width=True, hide_index=True)
