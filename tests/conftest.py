"""Shared pytest fixtures for the test suite.

Fixture overview
----------------
cfg           : configured AppConfig pointing at a fake backend URL
tables        : seeded mock tables pinned to a fixed "today"
backend       : fresh MockBackend over `tables` (never the process singleton)
mock_service  : patches data.service so mock-mode calls hit `backend`
fake_session  : requests.Session stand-in that records calls and replays
                queued FakeResponse objects
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Optional

import pytest

from config import AppConfig
from data import service
from data.mock_data import MockBackend, build_tables

TODAY = date(2026, 10, 19)

_NO_BODY = object()


# ── Config ───────────────────────────────────────────────────────────────────


@pytest.fixture
def cfg() -> AppConfig:
    return AppConfig(
        supabase_url="https://demo.supabase.co",
        supabase_anon_key="anon-key",
        supabase_access_token=None,
        storage_bucket="submissions",
        default_use_mock=False,
        fallback_to_mock=True,
        request_timeout=5.0,
        timezone="Asia/Kolkata",
        log_level="INFO",
    )


@pytest.fixture
def unconfigured_cfg(cfg: AppConfig) -> AppConfig:
    return replace(cfg, supabase_url="", supabase_anon_key=None)


# ── Mock backend ─────────────────────────────────────────────────────────────


@pytest.fixture
def tables():
    return build_tables(seed=7, today=TODAY)


@pytest.fixture
def backend(tables) -> MockBackend:
    return MockBackend(tables)


@pytest.fixture
def mock_service(monkeypatch: pytest.MonkeyPatch, backend: MockBackend) -> MockBackend:
    """Route service mock-mode (and fallback) reads and writes to a private backend."""
    monkeypatch.setattr(service, "get_mock_backend", lambda: backend)
    return backend


# ── HTTP ─────────────────────────────────────────────────────────────────────


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = _NO_BODY, headers: Optional[dict] = None):
        self.status_code = status_code
        self._json = json_data
        self.headers = headers or {}

    def json(self) -> Any:
        if self._json is _NO_BODY:
            raise ValueError("No JSON body")
        return self._json


class FakeSession:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.responses: list[FakeResponse] = []

    def queue(self, *responses: FakeResponse) -> "FakeSession":
        self.responses.extend(responses)
        return self

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            return FakeResponse(200, [])
        return self.responses.pop(0)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
