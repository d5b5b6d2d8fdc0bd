from __future__ import annotations

import streamlit as st

from components.narrative import render_empty, render_page_intro, render_warnings
from config import AppConfig
from data.aggregations import category_label, embedded_field
from data.service import file_url, get_gallery_submissions


def render(cfg: AppConfig, use_mock: bool) -> None:
    render_page_intro("Gallery", "Artwork, stories and performances shared by our young creators.")

    with st.spinner("Loading gallery..."):
        res = get_gallery_submissions(cfg, use_mock, approved_only=True)
    render_warnings(res)

    if res.df.empty:
        render_empty("Nothing in the gallery yet. Be the first to share!")
        return

    cols = st.columns(3)
    for i, sub in enumerate(res.df.to_dict("records")):
        with cols[i % 3]:
            with st.container(border=True):
                image = file_url(cfg, use_mock, sub.get("file_url"))
                if image:
                    st.image(image, use_container_width=True)
                st.write(sub.get("description") or "")
                event_title = embedded_field(sub.get("events"), "title")
                st.caption(" · ".join(p for p in [category_label(sub.get("category")), event_title] if p))
