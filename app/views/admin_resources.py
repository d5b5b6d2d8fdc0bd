from __future__ import annotations

from typing import Optional

import streamlit as st

from components.actions import confirm_delete, report
from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.service import delete_row, get_resources, save_resource

RESOURCE_TYPES = ["video", "article"]


def _resource_form(cfg: AppConfig, use_mock: bool, item: Optional[dict] = None) -> None:
    item = item or {}
    resource_id = item.get("id")

    with st.form(f"resource_form_{resource_id or 'new'}", clear_on_submit=resource_id is None):
        title = st.text_input("Title", value=item.get("title") or "")
        c1, c2 = st.columns([3, 1])
        kind = c1.selectbox(
            "Type",
            RESOURCE_TYPES,
            index=RESOURCE_TYPES.index(item["type"]) if item.get("type") in RESOURCE_TYPES else 0,
            format_func=str.title,
        )
        icon = c2.text_input("Icon", value=item.get("icon") or "")
        description = st.text_input("Short description", value=item.get("description") or "")
        url = st.text_input("Video URL", value=item.get("url") or "", help="Used for videos only.")
        content = st.text_area("Article body (HTML)", value=item.get("content") or "", help="Used for articles only.")
        submitted = st.form_submit_button("Save resource" if resource_id is not None else "Create resource")

    if submitted:
        form = {"title": title, "type": kind, "url": url, "content": content, "description": description, "icon": icon}
        report(save_resource(cfg, use_mock, form, resource_id=resource_id))


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Brainy Bites resources", "Videos and articles shown on the public Brainy Bites page.")

    with st.expander("➕ New resource", expanded=False):
        _resource_form(cfg, use_mock)

    with st.spinner("Loading resources..."):
        res = get_resources(cfg, use_mock)
    render_warnings(res)

    if res.df.empty:
        render_empty("No resources yet.")
        return

    for item in res.df.to_dict("records"):
        with st.container(border=True):
            st.markdown(f"**{item.get('icon') or ''} {item.get('title', '')}** · {item.get('type', '')}")
            if item.get("description"):
                st.caption(item["description"])
            with st.expander("Edit"):
                _resource_form(cfg, use_mock, item)
            if confirm_delete(f"resource_{item['id']}", "Delete resource"):
                report(delete_row(cfg, use_mock, "brainy_bites", item["id"]))
