from __future__ import annotations

import streamlit as st

from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.service import get_resources


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Brainy Bites", "Short videos and reads for curious minds.")

    with st.spinner("Loading resources..."):
        res = get_resources(cfg, use_mock)
    render_warnings(res)

    if res.df.empty:
        render_empty("No resources published yet.")
        return

    for item in res.df.to_dict("records"):
        with st.container(border=True):
            st.markdown(f"#### {item.get('icon') or '💡'} {item.get('title', '')}")
            if item.get("description"):
                st.caption(item["description"])
            if item.get("type") == "video" and item.get("url"):
                st.video(item["url"])
            elif item.get("content"):
                with st.expander("Read"):
                    st.markdown(item["content"], unsafe_allow_html=True)
