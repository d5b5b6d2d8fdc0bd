from __future__ import annotations

import streamlit as st

from components.actions import report, status_badge
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import PRIZE_LABELS, category_label, embedded_field, prize_label
from data.service import clean_id, get_event_submissions, get_event_winners, get_events, save_winners

NO_PRIZE = ""
PRIZES = [NO_PRIZE] + list(PRIZE_LABELS)


def _event_label(event: dict) -> str:
    return f"{event.get('title') or 'Untitled'} ({event.get('month_year') or 'no month'})"


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Hall of Fame", "Pick each event's winners, save a draft, then publish.")

    with st.spinner("Loading events..."):
        events = get_events(cfg, use_mock)
    render_warnings(events)
    if events.df.empty:
        render_empty("No events yet.")
        return

    by_id = {clean_id(e["id"]): e for e in events.df.to_dict("records")}
    event_id = st.selectbox("Event", list(by_id), format_func=lambda i: _event_label(by_id[i]))
    event = by_id[event_id]

    with st.spinner("Loading submissions..."):
        subs = get_event_submissions(cfg, use_mock, event_id)
        winners = get_event_winners(cfg, use_mock, event_id)
    render_warnings(subs, winners)

    current = {clean_id(w["submission_id"]): w.get("prize_type") for w in winners.df.to_dict("records")}
    published = "status" in winners.df and bool((winners.df["status"] == "published").any())
    st.markdown(
        f"{len(subs.df)} submissions · {len(current)} winners · "
        + status_badge("published" if published else "draft"),
        unsafe_allow_html=True,
    )

    if subs.df.empty:
        render_empty("No submissions for this event.")
        return

    with st.form(f"winners_{event_id}"):
        picks = {}
        for sub in subs.df.to_dict("records"):
            sub_id = clean_id(sub["id"])
            prize = current.get(sub_id, NO_PRIZE)
            c1, c2 = st.columns([3, 2])
            with c1:
                st.write(f"**{embedded_field(sub.get('profiles'), 'full_name') or 'Unknown'}**: {sub.get('description') or ''}")
                st.caption(f"{category_label(sub.get('category'))} · {sub.get('status') or 'pending'}")
            picks[sub_id] = c2.selectbox(
                "Prize",
                PRIZES,
                index=PRIZES.index(prize) if prize in PRIZES else 0,
                format_func=lambda p: prize_label(p) if p else "No prize",
                key=f"prize_{event_id}_{sub_id}",
            )
        draft = st.form_submit_button("💾 Save draft")
        publish = st.form_submit_button("🌐 Publish")

    if draft or publish:
        chosen = {sub_id: prize for sub_id, prize in picks.items() if prize}
        report(save_winners(cfg, use_mock, event, chosen, subs.df, status="published" if publish else "draft"))
