from __future__ import annotations

import base64
import os
from functools import lru_cache
from typing import Optional

import streamlit as st

from routes import Route

APP_NAME = "Creative Kids Hub"
TAGLINES = {
    "site": "Express yourself, challenge yourself, learn something new every month",
    "admin": "Admin dashboard · enrollments, submissions and events",
}


@lru_cache(maxsize=4)
def _asset_data_uri(filename: str, mime: str = "image/svg+xml") -> Optional[str]:
    path = os.path.join(os.path.dirname(__file__), "..", "assets", filename)
    if not os.path.exists(path):
        return None
    with open(path, "rb") as f:
        return f"data:{mime};base64,{base64.b64encode(f.read()).decode('utf-8')}"


def render_header(route: Route, use_mock: bool) -> None:
    logo = _asset_data_uri("logo.svg")
    logo_html = f'<img src="{logo}" style="height:30px; width:auto;" />' if logo else ""
    area = "Admin" if route.section == "admin" else "Website"
    mode = "Mock data" if use_mock else "Live backend"

    st.markdown(
        f"""
<div class="ckh-header">
  <div class="ckh-header-left">
    {logo_html}
    <div>
      <div class="ckh-title">{APP_NAME}</div>
      <div class="ckh-subtitle">{TAGLINES[route.section]}</div>
    </div>
  </div>
  <div class="pill"><span class="dot"></span>{area} · {mode}</div>
</div>
        """,
        unsafe_allow_html=True,
    )
