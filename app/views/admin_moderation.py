from __future__ import annotations

import streamlit as st

from components.actions import report
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import embedded_field
from data.service import get_pending_comments, set_status


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Moderation", "Comments wait here until an admin approves them.")

    with st.spinner("Loading comments..."):
        res = get_pending_comments(cfg, use_mock)
    render_warnings(res)

    if res.df.empty:
        render_empty("No comments waiting for moderation.")
        return

    for comment in res.df.to_dict("records"):
        user = comment.get("user")
        submission = comment.get("submission")
        with st.container(border=True):
            st.write(comment.get("content") or "")
            st.caption(
                f"by {embedded_field(user, 'full_name') or 'Unknown'} ({embedded_field(user, 'email') or 'no email'}) "
                f"on “{embedded_field(submission, 'description') or 'a submission'}” · {str(comment.get('created_at', ''))[:16]}"
            )
            a, r, _ = st.columns([1, 1, 4])
            if a.button("Approve", key=f"com_approve_{comment['id']}"):
                report(set_status(cfg, use_mock, "comments", comment["id"], "approved"))
            if r.button("Reject", key=f"com_reject_{comment['id']}"):
                report(set_status(cfg, use_mock, "comments", comment["id"], "rejected"))
