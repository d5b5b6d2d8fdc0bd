from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


#
# Shared theme tokens
# - Centralized here so components/styles.py and the Plotly theme agree.
#
THEME = {
    # Backgrounds (cream)
    "bg_primary": "#FFF9F0",     # page background
    "bg_secondary": "#FFFFFF",   # sidebar / top surfaces
    "bg_card": "#FFFFFF",       # card surface
    # Accents (sunset orange + deep purple)
    "accent_primary": "#F97316",    # orange 500
    "accent_secondary": "#FB923C",  # orange 400 (hover)
    "purple_900": "#2E1065",
    "purple_800": "#4C1D95",
    # Text + borders
    "text_primary": "#1F2937",
    "text_secondary": "rgba(31, 41, 55, 0.72)",
    "border_color": "#F1E7DA",
    "grid": "rgba(31, 41, 55, 0.10)",
    "shadow": "0 1px 3px rgba(16,24,40,0.08)",
    "radius_px": 14,
    # Status colors
    "success": "#067647",
    "warning": "#B54708",
    "danger": "#B42318",
}


@dataclass(frozen=True)
class AppConfig:
    # Required for "live data" mode (hosted backend)
    supabase_url: str
    supabase_anon_key: Optional[str]

    # Optional admin session token; when unset the anon key is sent as bearer.
    supabase_access_token: Optional[str]

    storage_bucket: str

    # Defaults
    default_use_mock: bool
    fallback_to_mock: bool
    request_timeout: float
    timezone: str
    log_level: str

    @property
    def rest_url(self) -> str:
        return f"{self.supabase_url.rstrip('/')}/rest/v1"

    @property
    def storage_url(self) -> str:
        return f"{self.supabase_url.rstrip('/')}/storage/v1/object/public"

    @property
    def is_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getbool(name: str, default: str) -> bool:
    return (_getenv(name, default) or default).lower() in ("1", "true", "yes", "on")


def _getfloat(name: str, default: float) -> float:
    raw = _getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_config() -> AppConfig:
    """
    Centralized config: this is the ONLY place env vars are read.
    - Loads `.env` if present (local dev)
    - Blank values are treated as unset
    """
    load_dotenv(override=False)

    return AppConfig(
        supabase_url=_getenv("SUPABASE_URL") or "",
        supabase_anon_key=_getenv("SUPABASE_ANON_KEY"),
        supabase_access_token=_getenv("SUPABASE_ACCESS_TOKEN"),
        storage_bucket=_getenv("STORAGE_BUCKET", "submissions") or "submissions",
        default_use_mock=_getbool("USE_MOCK_DATA", "true"),
        fallback_to_mock=_getbool("FALLBACK_TO_MOCK", "true"),
        request_timeout=_getfloat("REQUEST_TIMEOUT", 15.0),
        timezone=_getenv("APP_TIMEZONE", "Asia/Kolkata") or "Asia/Kolkata",
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
