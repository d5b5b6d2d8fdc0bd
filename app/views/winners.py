from __future__ import annotations

from datetime import date

import streamlit as st

from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import (
    MONTHS,
    category_label,
    embedded_field,
    group_winners_by_month,
    previous_month,
    prize_label,
)
from data.service import file_url, get_winners

CATEGORIES = ["art", "music", "storytelling"]


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Winners", "Celebrating the brightest entries from every monthly challenge.")

    today = date.today()
    default_year, default_month = previous_month(today)
    years = list(range(today.year, today.year - 3, -1))

    c1, c2, c3 = st.columns(3)
    year = c1.selectbox("Year", years, index=years.index(default_year))
    month = c2.selectbox(
        "Month",
        [0] + list(range(1, 13)),
        index=default_month,
        format_func=lambda m: "All months" if m == 0 else MONTHS[m - 1],
    )
    category = c3.selectbox(
        "Category",
        ["all"] + CATEGORIES,
        format_func=lambda c: "All categories" if c == "all" else category_label(c),
    )

    with st.spinner("Loading winners..."):
        res = get_winners(
            cfg,
            use_mock,
            year=year,
            month=month or None,
            category=None if category == "all" else category,
        )
    render_warnings(res)

    groups = group_winners_by_month(res.df)
    if not groups:
        render_empty("No winners announced for this selection yet.")
        return

    for title, winners in groups.items():
        st.markdown(f'<div class="section-title">{title}</div>', unsafe_allow_html=True)
        cols = st.columns(4)
        for i, w in enumerate(winners.to_dict("records")):
            with cols[i % 4]:
                with st.container(border=True):
                    image = file_url(cfg, use_mock, embedded_field(w.get("submissions"), "file_url"))
                    if image:
                        st.image(image, use_container_width=True)
                    st.markdown(f"**{prize_label(w.get('prize_type'))}**")
                    st.write(embedded_field(w.get("profiles"), "full_name") or "Anonymous")
                    st.caption(category_label(w.get("category")))
