"""
URL path table for the routing shell. No Streamlit imports here.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PATH = "home"


@dataclass(frozen=True)
class Route:
    path: str
    label: str
    section: str  # "site" | "admin"


ROUTES = [
    Route("home", "🏠 Home", "site"),
    Route("events", "📅 Events", "site"),
    Route("winners", "🏆 Winners", "site"),
    Route("gallery", "🖼️ Gallery", "site"),
    Route("brainy-bites", "💡 Brainy Bites", "site"),
    Route("admin", "📊 Dashboard", "admin"),
    Route("admin/analytics", "📈 Analytics", "admin"),
    Route("admin/enrollments", "📝 Enrollments", "admin"),
    Route("admin/submissions", "📥 Submissions", "admin"),
    Route("admin/users", "👥 Users", "admin"),
    Route("admin/events", "🗓️ Events", "admin"),
    Route("admin/resources", "📚 Resources", "admin"),
    Route("admin/gallery", "🎨 Gallery", "admin"),
    Route("admin/certificates", "🎓 Certificates", "admin"),
    Route("admin/hall-of-fame", "🏆 Hall of Fame", "admin"),
    Route("admin/moderation", "💬 Moderation", "admin"),
]

_BY_PATH = {r.path: r for r in ROUTES}


def normalize_path(path: str | None) -> str:
    if not path:
        return DEFAULT_PATH
    parts = [p for p in str(path).strip().lower().split("/") if p]
    return "/".join(parts) or DEFAULT_PATH


def resolve_route(path: str | None) -> Route:
    """Unknown paths land on the home page."""
    return _BY_PATH.get(normalize_path(path), _BY_PATH[DEFAULT_PATH])


def routes_for(section: str) -> list[Route]:
    return [r for r in ROUTES if r.section == section]
