from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from config import AppConfig
from routes import DEFAULT_PATH, ROUTES, Route, resolve_route, routes_for


@dataclass(frozen=True)
class SidebarState:
    route: Route
    use_mock: bool


def navigate(path: str, **params: str) -> None:
    """Switch page (and page params such as ?status=pending) on the next run."""
    st.query_params.clear()
    st.query_params["page"] = path
    for key, value in params.items():
        st.query_params[key] = value
    st.session_state["nav_path"] = path
    st.rerun()


def render_sidebar(cfg: AppConfig) -> SidebarState:
    requested = st.query_params.get("page") or st.session_state.get("nav_path", DEFAULT_PATH)
    current = resolve_route(requested)

    with st.sidebar:
        st.markdown("### 🌈 Creative Kids Hub")
        st.caption(
            f"Website: {len(routes_for('site'))} pages · Admin: {len(routes_for('admin'))} pages"
        )

        labels = [r.label if r.section == "site" else f"Admin · {r.label}" for r in ROUTES]
        label = st.radio(
            "Nav",
            labels,
            index=ROUTES.index(current),
            label_visibility="collapsed",
        )
        route = ROUTES[labels.index(label)]

        with st.expander("⚙️ Settings", expanded=False):
            use_mock = st.toggle(
                "Use mock data",
                value=st.session_state.get("use_mock", cfg.default_use_mock),
                help="When off, the app talks to the hosted backend. Read failures fall back to mock data.",
            )
            st.session_state["use_mock"] = use_mock

            st.markdown("**Backend**")
            st.code(cfg.supabase_url or "(not configured)", language="text")
    use_mock = st.session_state.get("use_mock", cfg.default_use_mock)

    if route.path != current.path:
        # user picked another page: page-specific params no longer apply
        st.query_params.clear()
    st.query_params["page"] = route.path
    st.session_state["nav_path"] = route.path

    return SidebarState(route=route, use_mock=use_mock)
