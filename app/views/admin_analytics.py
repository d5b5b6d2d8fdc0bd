from __future__ import annotations

import streamlit as st

from components.metrics import Kpi, bar_chart, line_chart, pie_chart, render_kpi_row
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.service import get_analytics_stats, get_signup_trend, get_submission_categories, get_top_schools


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Analytics", "Growth, participation and where our creators come from.")

    with st.spinner("Crunching numbers..."):
        stats = get_analytics_stats(cfg, use_mock)
        trend = get_signup_trend(cfg, use_mock, days=7)
        categories = get_submission_categories(cfg, use_mock)
        schools = get_top_schools(cfg, use_mock, n=5)
    render_warnings(stats, trend, categories, schools)

    s = stats.stats
    render_kpi_row(
        [
            Kpi("Total users", str(s.get("total_users", 0)), "👥"),
            Kpi("Submissions", str(s.get("total_submissions", 0)), "📥"),
            Kpi("Active events", str(s.get("active_events", 0)), "📅"),
            Kpi("Schools", str(s.get("total_schools", 0)), "🏫"),
        ]
    )

    if trend.df.empty:
        render_empty("No signups recorded yet.")
    else:
        line_chart(trend.df, x="date", y="users", title="New signups (last 7 days)", x_title="Day", y_title="Signups")

    left, right = st.columns(2)
    with left:
        if categories.df.empty:
            render_empty("No submissions yet.")
        else:
            pie_chart(categories.df, names="name", values="value", title="Submissions by category")
    with right:
        if schools.df.empty:
            render_empty("No school information on profiles yet.")
        else:
            bar_chart(schools.df, x="name", y="students", title="Top schools", horizontal=True)
