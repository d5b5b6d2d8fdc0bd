from __future__ import annotations

import streamlit as st

from components.actions import report, status_badge
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import activity_label, search_rows
from data.service import get_enrollments, set_status


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Enrollments", "Confirm new registrations and track payments.")

    term = st.text_input("Search", placeholder="Child name, contact or activity")

    with st.spinner("Loading enrollments..."):
        res = get_enrollments(cfg, use_mock)
    render_warnings(res)

    df = search_rows(res.df, term, ["child_name", "parent_contact", "activity_type"])
    if df.empty:
        render_empty("No enrollments match." if term else "No enrollments yet.")
        return

    st.caption(f"{len(df)} enrollment(s)")
    for row in df.to_dict("records"):
        status = row.get("status") or "pending"
        c1, c2, c3, c4 = st.columns([3, 2, 1, 2])
        c1.markdown(f"**{row.get('child_name') or 'Unnamed'}**  \n{row.get('parent_contact') or ''}")
        c2.write(activity_label(row.get("activity_type")))
        c3.markdown(status_badge(status), unsafe_allow_html=True)
        with c4:
            if status == "pending":
                a, r = st.columns(2)
                if a.button("Confirm", key=f"enr_confirm_{row['id']}"):
                    report(set_status(cfg, use_mock, "enrollments", row["id"], "confirmed"))
                if r.button("Reject", key=f"enr_reject_{row['id']}"):
                    report(set_status(cfg, use_mock, "enrollments", row["id"], "rejected"))
            elif status == "confirmed":
                if st.button("Mark paid", key=f"enr_paid_{row['id']}"):
                    report(set_status(cfg, use_mock, "enrollments", row["id"], "paid"))
        st.divider()
