from __future__ import annotations

import pandas as pd
import streamlit as st

from components.actions import report
from components.metrics import Kpi, render_kpi_row, render_share_bars
from components.narrative import render_callout, render_empty, render_page_intro, render_warnings
from components.sidebar import navigate
from config import AppConfig
from data.aggregations import activity_label, category_label, format_inr, has_pending_actions
from data.service import (
    approve_submission,
    file_url,
    get_pending_stats,
    get_pending_submissions,
    get_registration_breakdown,
    get_revenue_breakdown,
    set_status,
)


def _pending_actions(stats: dict) -> None:
    if not has_pending_actions(stats):
        return
    render_kpi_row(
        [
            Kpi("Pending submissions", str(stats.get("pending_submissions", 0)), "📥"),
            Kpi("Certificates to approve", str(stats.get("pending_certificates", 0)), "🎓"),
            Kpi("Events ending this week", str(stats.get("expiring_events", 0)), "⏳"),
        ]
    )
    if stats.get("pending_submissions", 0) and st.button("Review pending submissions →"):
        navigate("admin/submissions", status="pending")
    if stats.get("pending_certificates", 0) and st.button("Review certificates →"):
        navigate("admin/certificates")


def _financial_overview(revenue: dict) -> None:
    st.markdown('<div class="section-title">Financial overview</div>', unsafe_allow_html=True)
    st.metric("Total revenue", format_inr(revenue.get("total", 0)))
    rows: pd.DataFrame = revenue.get("rows", pd.DataFrame())
    if rows.empty:
        render_empty("No invoices yet.")
        return
    total = float(revenue.get("total") or 0)
    rows = rows.assign(
        label=rows["type"].map(activity_label),
        share=(rows["amount"] / total * 100) if total else 0.0,
    )
    render_share_bars(rows, "label", "amount", "share", value_fmt=format_inr)


def _registration_overview(registrations: dict) -> None:
    st.markdown('<div class="section-title">Registrations</div>', unsafe_allow_html=True)
    st.metric("Total registrations", registrations.get("total", 0))
    rows: pd.DataFrame = registrations.get("rows", pd.DataFrame())
    if rows.empty:
        render_empty("No registrations yet.")
        return
    rows = rows.assign(label=rows["type"].map(activity_label))
    render_share_bars(rows, "label", "count", "share")


def _pending_submissions(cfg: AppConfig, use_mock: bool, df: pd.DataFrame) -> None:
    st.markdown('<div class="section-title">Pending submissions</div>', unsafe_allow_html=True)
    if df.empty:
        render_empty("All caught up: no submissions waiting for review.")
        return

    for sub in df.to_dict("records"):
        with st.container(border=True):
            c1, c2 = st.columns([1, 3])
            image = file_url(cfg, use_mock, sub.get("file_url"))
            if image:
                c1.image(image, use_container_width=True)
            with c2:
                st.write(sub.get("description") or "")
                st.caption(f"{category_label(sub.get('category'))} · {str(sub.get('created_at', ''))[:10]}")
                a, r = st.columns(2)
                if a.button("✅ Approve", key=f"dash_approve_{sub['id']}"):
                    report(approve_submission(cfg, use_mock, sub))
                if r.button("❌ Reject", key=f"dash_reject_{sub['id']}"):
                    report(set_status(cfg, use_mock, "submissions", sub["id"], "rejected"))


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Dashboard", "What needs attention today, and how the programs are doing.")

    with st.spinner("Loading dashboard..."):
        pending = get_pending_stats(cfg, use_mock)
        revenue = get_revenue_breakdown(cfg, use_mock)
        registrations = get_registration_breakdown(cfg, use_mock)
        submissions = get_pending_submissions(cfg, use_mock)
    render_warnings(pending, revenue, registrations, submissions)

    if has_pending_actions(pending.stats):
        render_callout("Pending actions", "These items are waiting on an admin.", kind="action")
    _pending_actions(pending.stats)

    left, right = st.columns(2)
    with left:
        _financial_overview(revenue.stats)
    with right:
        _registration_overview(registrations.stats)

    _pending_submissions(cfg, use_mock, submissions.df)
