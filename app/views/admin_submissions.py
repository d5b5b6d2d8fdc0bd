from __future__ import annotations

import streamlit as st

from components.actions import confirm_delete, report, status_badge
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import category_label, embedded_field
from data.service import approve_submission, delete_row, file_url, get_submissions, set_status

STATUSES = ["all", "pending", "approved", "rejected"]


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Submissions", "Review what creators have shared.")

    # ?status=pending arrives from the dashboard's pending-actions link
    requested = st.query_params.get("status", "all")
    status = st.selectbox(
        "Status",
        STATUSES,
        index=STATUSES.index(requested) if requested in STATUSES else 0,
        format_func=str.title,
    )
    if status == "all":
        st.query_params.pop("status", None)
    else:
        st.query_params["status"] = status

    with st.spinner("Loading submissions..."):
        res = get_submissions(cfg, use_mock, None if status == "all" else status)
    render_warnings(res)

    if res.df.empty:
        render_empty("No submissions with this status.")
        return

    for sub in res.df.to_dict("records"):
        with st.container(border=True):
            c1, c2, c3 = st.columns([1, 3, 1])
            image = file_url(cfg, use_mock, sub.get("file_url"))
            if image:
                c1.image(image, use_container_width=True)
            with c2:
                st.markdown(status_badge(sub.get("status")), unsafe_allow_html=True)
                st.write(sub.get("description") or "")
                st.caption(
                    f"{category_label(sub.get('category'))} · "
                    f"{embedded_field(sub.get('events'), 'title') or 'No event'} · {str(sub.get('created_at', ''))[:10]}"
                )
            with c3:
                if sub.get("status") != "approved" and st.button("✅ Approve", key=f"sub_approve_{sub['id']}"):
                    report(approve_submission(cfg, use_mock, sub))
                if sub.get("status") != "rejected" and st.button("❌ Reject", key=f"sub_reject_{sub['id']}"):
                    report(set_status(cfg, use_mock, "submissions", sub["id"], "rejected"))
                if confirm_delete(f"sub_{sub['id']}"):
                    report(delete_row(cfg, use_mock, "submissions", sub["id"]))
