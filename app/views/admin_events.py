from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Optional

import pandas as pd
import streamlit as st

from components.actions import confirm_delete, report, status_badge
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import PROGRAM_LABELS, join_csv, program_label
from data.service import delete_row, get_event_months, get_events_by_month, save_event

EVENT_TYPES = ["competition", "workshop"]


def _as_date(value: Any, default: date) -> date:
    parsed = pd.to_datetime(value, errors="coerce", utc=True)
    return default if pd.isna(parsed) else parsed.date()


def _event_form(cfg: AppConfig, use_mock: bool, event: Optional[dict] = None) -> None:
    event = event or {}
    event_id = event.get("id")
    today = date.today()
    start_default = _as_date(event.get("start_date"), today)
    categories = list(PROGRAM_LABELS)

    with st.form(f"event_form_{event_id or 'new'}", clear_on_submit=event_id is None):
        title = st.text_input("Title", value=event.get("title") or "")
        c1, c2 = st.columns(2)
        kind = c1.selectbox(
            "Type",
            EVENT_TYPES,
            index=EVENT_TYPES.index(event["type"]) if event.get("type") in EVENT_TYPES else 0,
        )
        category = c2.selectbox(
            "Program",
            categories,
            index=categories.index(event["activity_category"]) if event.get("activity_category") in categories else 0,
            format_func=program_label,
        )
        d1, d2 = st.columns(2)
        start = d1.date_input("Start date", value=start_default)
        end = d2.date_input("End date", value=_as_date(event.get("end_date"), start_default + timedelta(days=14)))
        description = st.text_area("Description", value=event.get("description") or "")
        e1, e2, e3 = st.columns(3)
        icon = e1.text_input("Icon", value=event.get("icon") or "")
        color = e2.text_input("Color", value=event.get("color") or "")
        formats = e3.text_input("Formats", value=event.get("formats") or "")
        skills = st.text_input(
            "Skills (comma-separated)",
            value=join_csv(event.get("skills")),
            placeholder="Creativity, Communication",
        )
        submitted = st.form_submit_button("Save event" if event_id is not None else "Create event")

    if submitted:
        form = {
            "title": title,
            "type": kind,
            "activity_category": category,
            "start_date": start,
            "end_date": end,
            "description": description,
            "icon": icon,
            "color": color,
            "formats": formats,
            "skills": skills,
        }
        report(save_event(cfg, use_mock, form, event_id=event_id))


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Events", "Create, edit and retire monthly events.")

    with st.expander("➕ New event", expanded=False):
        _event_form(cfg, use_mock)

    with st.spinner("Loading events..."):
        months = get_event_months(cfg, use_mock)
    month = st.selectbox("Month", ["all"] + months, format_func=lambda m: "All months" if m == "all" else m)

    with st.spinner("Loading events..."):
        res = get_events_by_month(cfg, use_mock, None if month == "all" else month)
    render_warnings(res)

    if res.df.empty:
        render_empty("No events for this month.")
        return

    for event in res.df.to_dict("records"):
        with st.container(border=True):
            c1, c2 = st.columns([4, 1])
            with c1:
                st.markdown(f"**{event.get('icon') or ''} {event.get('title', '')}**")
                st.caption(
                    f"{program_label(event.get('activity_category'))} · {event.get('start_date', '')} → "
                    f"{str(event.get('end_date', ''))[:10]} · skills: {join_csv(event.get('skills')) or 'none'}"
                )
            c2.markdown(status_badge(event.get("status")), unsafe_allow_html=True)
            with st.expander("Edit"):
                _event_form(cfg, use_mock, event)
            if confirm_delete(f"event_{event['id']}", "Delete event"):
                report(delete_row(cfg, use_mock, "events", event["id"]))
