from __future__ import annotations

import streamlit as st

from components.actions import report, status_badge
from components.metrics import Kpi, render_kpi_row
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.service import approve_certificates, get_certificates, get_event_months, set_certificate

ALL_MONTHS = "All months"
SHOW = ["Waiting", "All"]


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Certificates", "Approve participation and winner certificates.")

    c1, c2 = st.columns(2)
    month = c1.selectbox("Event month", [ALL_MONTHS] + get_event_months(cfg, use_mock))
    show = c2.radio("Show", SHOW, horizontal=True)

    with st.spinner("Loading certificates..."):
        res = get_certificates(cfg, use_mock, None if month == ALL_MONTHS else month)
    render_warnings(res)

    df = res.df
    waiting = int((~df["approved"]).sum()) if not df.empty else 0
    render_kpi_row(
        [
            Kpi("Certificates", str(len(df)), "🎓"),
            Kpi("Approved", str(len(df) - waiting), "✅"),
            Kpi("Waiting", str(waiting), "⏳"),
        ]
    )

    if show == "Waiting" and not df.empty:
        df = df[~df["approved"]]
    if df.empty:
        render_empty("No certificates here.")
        return

    if waiting and st.button(f"✅ Approve all visible ({int((~df['approved']).sum())})"):
        report(approve_certificates(cfg, use_mock, df))

    for cert in df.to_dict("records"):
        with st.container(border=True):
            a, b = st.columns([4, 1])
            with a:
                st.markdown(
                    f"**{cert['name']}** · {cert['kind']} · "
                    + status_badge("approved" if cert["approved"] else "pending"),
                    unsafe_allow_html=True,
                )
                st.caption(f"{cert['event']} · {str(cert.get('created_at') or '')[:10]}")
            key = f"cert_{cert['table']}_{cert['row_id']}"
            if cert["approved"]:
                if b.button("Revoke", key=key):
                    report(set_certificate(cfg, use_mock, cert["table"], cert["row_id"], False))
            elif b.button("Approve", key=key):
                report(set_certificate(cfg, use_mock, cert["table"], cert["row_id"], True))
