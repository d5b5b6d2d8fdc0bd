"""
Data access layer.

Design rules:
- Views call ONLY functions in data.service.
- Clients here are thin passthroughs to the backend table API; no logic.
- No env var reads here (config-only).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Optional, Sequence
from urllib.parse import quote

import pandas as pd
import requests

from config import AppConfig
from data.queries import Filter, TableQuery

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.details = details
        self.hint = hint


class BackendAuthError(BackendError):
    pass


def _parse_content_range(value: Optional[str]) -> int:
    # "0-24/573" or "*/573"; "*" total means unknown
    if not value or "/" not in value:
        return 0
    total = value.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else 0


def rows_to_frame(rows: Any) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame()
    if isinstance(rows, dict):
        rows = [rows]
    return pd.DataFrame.from_records(rows)


def public_url(base: str, bucket: str, path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    return f"{base.rstrip('/')}/{bucket}/{quote(path.lstrip('/'))}"


@dataclass
class RestClient:
    """
    Passthrough client for the hosted PostgREST table API.

    Every method maps to one HTTP request; results come back as
    pandas.DataFrame so views and aggregation helpers share one shape.
    """

    cfg: AppConfig
    session: requests.Session = field(default_factory=requests.Session)

    def _headers(self, prefer: Optional[str] = None) -> dict[str, str]:
        if not self.cfg.is_configured:
            raise BackendAuthError(
                "Missing SUPABASE_URL / SUPABASE_ANON_KEY for backend access. "
                "Set both in the environment or turn on mock data."
            )
        token = self.cfg.supabase_access_token or self.cfg.supabase_anon_key
        headers = {
            "apikey": str(self.cfg.supabase_anon_key),
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        table: str,
        params: Sequence[tuple[str, str]] = (),
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> requests.Response:
        url = f"{self.cfg.rest_url}/{table}"
        headers = self._headers(prefer)
        logger.debug("%s %s params=%s", method, table, list(params))
        resp = self.session.request(
            method,
            url,
            params=list(params),
            json=json,
            headers=headers,
            timeout=self.cfg.request_timeout,
        )
        if resp.status_code >= 300:
            raise self._error_from(resp, table)
        return resp

    @staticmethod
    def _error_from(resp: requests.Response, table: str) -> BackendError:
        payload: dict[str, Any] = {}
        try:
            body = resp.json()
            if isinstance(body, dict):
                payload = body
        except ValueError:
            pass
        message = payload.get("message") or f"HTTP {resp.status_code} from {table}"
        cls = BackendAuthError if resp.status_code in (401, 403) else BackendError
        return cls(
            message,
            status=resp.status_code,
            code=payload.get("code"),
            details=payload.get("details"),
            hint=payload.get("hint"),
        )

    def select(self, query: TableQuery) -> pd.DataFrame:
        resp = self._request("GET", query.table, params=query.to_params())
        return rows_to_frame(resp.json())

    def count(self, query: TableQuery) -> int:
        params = [("select", "*")] + [f.to_param() for f in query.filters]
        resp = self._request("HEAD", query.table, params=params, prefer="count=exact")
        return _parse_content_range(resp.headers.get("Content-Range"))

    def insert(self, table: str, rows: list[dict[str, Any]]) -> pd.DataFrame:
        resp = self._request("POST", table, json=rows, prefer="return=representation")
        return rows_to_frame(resp.json())

    def update(self, table: str, values: dict[str, Any], filters: Sequence[Filter]) -> pd.DataFrame:
        if not filters:
            raise ValueError(f"Refusing to update every row of {table}")
        params = [f.to_param() for f in filters]
        resp = self._request("PATCH", table, params=params, json=values, prefer="return=representation")
        return rows_to_frame(resp.json())

    def delete(self, table: str, filters: Sequence[Filter]) -> int:
        if not filters:
            raise ValueError(f"Refusing to delete every row of {table}")
        params = [f.to_param() for f in filters]
        resp = self._request("DELETE", table, params=params, prefer="return=representation")
        return len(resp.json() or [])

    def storage_public_url(self, bucket: str, path: str) -> str:
        return public_url(self.cfg.storage_url, bucket, path)


@lru_cache(maxsize=4)
def get_rest_client(cfg: AppConfig) -> RestClient:
    """One client (and one pooled requests.Session) per configuration."""
    return RestClient(cfg=cfg)
