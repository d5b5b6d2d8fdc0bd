"""
Routing only.

All view logic lives in app/views/.
All env reads happen ONLY in config.py.
"""

from __future__ import annotations

import os
import sys

# Make `app/` importable as a flat module path when running:
#   streamlit run app/app.py
APP_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(APP_DIR, ".."))
for p in [APP_DIR, REPO_ROOT]:
    if p not in sys.path:
        sys.path.insert(0, p)

import streamlit as st  # noqa: E402

from components.actions import show_flash  # noqa: E402
from components.header import render_header  # noqa: E402
from components.sidebar import render_sidebar  # noqa: E402
from components.styles import apply_theme  # noqa: E402
from config import get_config  # noqa: E402
from logging_setup import setup_logging  # noqa: E402

from views import (  # noqa: E402
    admin_analytics,
    admin_certificates,
    admin_dashboard,
    admin_enrollments,
    admin_events,
    admin_gallery,
    admin_hall_of_fame,
    admin_moderation,
    admin_resources,
    admin_submissions,
    admin_users,
    brainy_bites,
    events,
    gallery,
    home,
    winners,
)

VIEWS = {
    "home": home.render,
    "events": events.render,
    "winners": winners.render,
    "gallery": gallery.render,
    "brainy-bites": brainy_bites.render,
    "admin": admin_dashboard.render,
    "admin/analytics": admin_analytics.render,
    "admin/enrollments": admin_enrollments.render,
    "admin/submissions": admin_submissions.render,
    "admin/users": admin_users.render,
    "admin/events": admin_events.render,
    "admin/resources": admin_resources.render,
    "admin/gallery": admin_gallery.render,
    "admin/certificates": admin_certificates.render,
    "admin/hall-of-fame": admin_hall_of_fame.render,
    "admin/moderation": admin_moderation.render,
}


def main() -> None:
    apply_theme()
    cfg = get_config()
    setup_logging(cfg.log_level)
    state = render_sidebar(cfg)

    render_header(state.route, state.use_mock)
    show_flash()

    # Routing only
    view = VIEWS.get(state.route.path)
    if view is None:
        st.error("Unknown view")
        return
    view(cfg, state.use_mock)


if __name__ == "__main__":
    main()
