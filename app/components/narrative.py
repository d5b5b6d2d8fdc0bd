from __future__ import annotations

import streamlit as st


def render_page_intro(title: str, subtitle: str | None = None) -> None:
    st.markdown(
        f"""
<div class="page-intro">
  <div class="page-intro-title">{title}</div>
  {f'<div class="page-intro-subtitle">{subtitle}</div>' if subtitle else ''}
</div>
        """,
        unsafe_allow_html=True,
    )


def render_callout(title: str, body: str, kind: str = "info") -> None:
    """kind: "info" (purple rail) | "action" (orange rail)."""
    st.markdown(
        f"""
<div class="callout callout-{kind}">
  <div class="callout-title">{title}</div>
  <div class="callout-body">{body}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render_warnings(*results) -> None:
    """Surface service warnings (fallbacks, failed loads) once per distinct message."""
    seen = set()
    for res in results:
        warning = getattr(res, "warning", None)
        if warning and warning not in seen:
            seen.add(warning)
            st.warning(warning)


def render_empty(message: str) -> None:
    st.info(message)
