from __future__ import annotations

import streamlit as st

from components.actions import confirm_delete, report, status_badge
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import category_label, embedded_field
from data.service import approve_submission, delete_row, file_url, get_gallery_submissions


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Gallery", "Approving a piece publishes it and awards the event's skills to its creator.")

    with st.spinner("Loading gallery..."):
        res = get_gallery_submissions(cfg, use_mock)
    render_warnings(res)

    if res.df.empty:
        render_empty("No submissions yet.")
        return

    cols = st.columns(3)
    for i, sub in enumerate(res.df.to_dict("records")):
        with cols[i % 3]:
            with st.container(border=True):
                image = file_url(cfg, use_mock, sub.get("file_url"))
                if image:
                    st.image(image, use_container_width=True)
                st.markdown(status_badge(sub.get("status")), unsafe_allow_html=True)
                st.write(sub.get("description") or "")
                st.caption(
                    f"{category_label(sub.get('category'))} · {embedded_field(sub.get('events'), 'title') or 'No event'}"
                )
                if sub.get("status") != "approved" and st.button("✅ Approve", key=f"gal_approve_{sub['id']}"):
                    report(approve_submission(cfg, use_mock, sub))
                if confirm_delete(f"gal_{sub['id']}"):
                    report(delete_row(cfg, use_mock, "submissions", sub["id"]))
