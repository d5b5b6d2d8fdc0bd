"""
Tests for the service layer: read fallback, pending stats, writes and the
skill award that follows a submission approval.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import numpy as np
import pandas as pd
import pytest

from conftest import FakeResponse, FakeSession
from data import service
from data.connection import BackendError, RestClient
from data.mock_data import MockBackend
from data.queries import TableQuery, eq

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# ── Reads ────────────────────────────────────────────────────────────────────


class TestFallback:
    def test_mock_mode_reads_mock(self, cfg, mock_service) -> None:
        res = service.get_profiles(cfg, use_mock=True)
        assert res.source == "mock"
        assert res.warning is None
        assert len(res.df) == 60

    def test_backend_failure_falls_back_with_warning(self, unconfigured_cfg, mock_service) -> None:
        res = service.get_profiles(unconfigured_cfg, use_mock=False)
        assert res.source == "mock"
        assert res.warning == "Fell back to mock data: BackendAuthError"
        assert len(res.df) == 60

    def test_fallback_disabled_returns_empty(self, unconfigured_cfg, mock_service) -> None:
        res = service.get_profiles(replace(unconfigured_cfg, fallback_to_mock=False), use_mock=False)
        assert res.source == "backend"
        assert res.df.empty
        assert res.warning == "Could not load data: BackendAuthError"

    def test_stats_fall_back_too(self, cfg, mock_service, monkeypatch) -> None:
        session = FakeSession().queue(FakeResponse(500, {"message": "boom"}))
        monkeypatch.setattr(service, "get_rest_client", lambda c: RestClient(cfg=c, session=session))
        res = service.get_analytics_stats(cfg, use_mock=False)
        assert res.source == "mock"
        assert res.warning == "Fell back to mock data: BackendError"
        assert res.stats["total_users"] == 60

    def test_live_read_uses_rest_client(self, cfg, mock_service, monkeypatch) -> None:
        session = FakeSession().queue(FakeResponse(200, [{"id": 1, "full_name": "Asha"}]))
        monkeypatch.setattr(service, "get_rest_client", lambda c: RestClient(cfg=c, session=session))
        res = service.get_profiles(cfg, use_mock=False)
        assert res.source == "backend"
        assert res.df["full_name"].tolist() == ["Asha"]


class TestDashboardReads:
    def test_pending_stats(self, cfg, mock_service, tables) -> None:
        subs, winners, events = tables["submissions"], tables["winners"], tables["events"]
        ends = pd.to_datetime(events["end_date"], utc=True, format="ISO8601")
        expected = {
            "pending_submissions": int((subs["status"] == "pending").sum()),
            "pending_certificates": int(((subs["status"] == "approved") & ~subs["certificate_approved"]).sum())
            + int((~winners["certificate_approved"]).sum()),
            "expiring_events": int(((ends > NOW) & (ends < NOW + timedelta(days=7))).sum()),
        }
        res = service.get_pending_stats(cfg, use_mock=True, now=NOW)
        assert res.stats == expected

    def test_revenue_total_matches_invoices(self, cfg, mock_service, tables) -> None:
        res = service.get_revenue_breakdown(cfg, use_mock=True)
        assert res.stats["total"] == pytest.approx(float(tables["invoices"]["amount"].sum()))
        assert res.stats["rows"]["amount"].sum() == pytest.approx(res.stats["total"])

    def test_registrations_total(self, cfg, mock_service) -> None:
        res = service.get_registration_breakdown(cfg, use_mock=True)
        assert res.stats["total"] == 40
        assert res.stats["rows"]["share"].sum() == pytest.approx(100.0)


class TestAnalyticsReads:
    def test_stat_cards(self, cfg, mock_service, tables) -> None:
        stats = service.get_analytics_stats(cfg, use_mock=True).stats
        assert stats["total_users"] == 60
        assert stats["total_submissions"] == 50
        assert stats["active_events"] == int((tables["events"]["status"] == "active").sum())
        assert stats["total_schools"] == tables["profiles"]["school_name"].dropna().nunique()

    def test_signup_trend_is_at_most_a_week(self, cfg, mock_service) -> None:
        df = service.get_signup_trend(cfg, use_mock=True).df
        assert 0 < len(df) <= 7
        assert df["date"].tolist() == sorted(df["date"].tolist())

    def test_top_schools(self, cfg, mock_service) -> None:
        df = service.get_top_schools(cfg, use_mock=True, n=3).df
        assert len(df) == 3
        assert df["students"].is_monotonic_decreasing


class TestListReads:
    def test_event_months_unique_newest_first(self, cfg, mock_service, tables) -> None:
        months = service.get_event_months(cfg, use_mock=True)
        assert months == sorted(set(tables["events"]["month_year"]), reverse=True)

    def test_active_events_by_category(self, cfg, mock_service) -> None:
        df = service.get_events(cfg, use_mock=True, status="active", category="express").df
        assert set(df.get("status", [])) <= {"active"}
        assert set(df.get("activity_category", [])) <= {"express"}

    def test_winners_for_previous_month(self, cfg, mock_service) -> None:
        df = service.get_winners(cfg, use_mock=True, year=2026, month=9).df
        assert len(df) == 4
        assert all(isinstance(p, dict) and "full_name" in p for p in df["profiles"])

    def test_leaderboard_sorted_by_xp(self, cfg, mock_service) -> None:
        df = service.get_leaderboard(cfg, use_mock=True, limit=5).df
        assert len(df) == 5
        assert df["xp"].is_monotonic_decreasing

    def test_pending_comments_embed_author(self, cfg, mock_service) -> None:
        df = service.get_pending_comments(cfg, use_mock=True).df
        assert (df["status"] == "pending").all()
        assert all("email" in u for u in df["user"])

    def test_gallery_approved_only(self, cfg, mock_service) -> None:
        df = service.get_gallery_submissions(cfg, use_mock=True, approved_only=True).df
        assert not df.empty
        assert (df["status"] == "approved").all()

    def test_file_url(self, cfg, mock_service) -> None:
        assert service.file_url(cfg, True, None) is None
        assert service.file_url(cfg, True, "https://x/y.png") == "https://x/y.png"


# ── Writes ───────────────────────────────────────────────────────────────────


class TestStatusWrites:
    def test_set_status_updates_row(self, cfg, mock_service) -> None:
        res = service.set_status(cfg, True, "enrollments", np.int64(1), "confirmed")
        assert res.ok
        assert res.message == "enrollments 1 marked confirmed"
        row = mock_service.select(TableQuery("enrollments", filters=(eq("id", 1),))).iloc[0]
        assert row["status"] == "confirmed"

    def test_delete_row(self, cfg, mock_service) -> None:
        res = service.delete_row(cfg, True, "comments", 3.0)
        assert res.ok
        assert res.message == "Deleted 1 row(s) from comments"
        assert mock_service.count(TableQuery("comments", filters=(eq("id", 3),))) == 0

    def test_writes_never_fall_back(self, unconfigured_cfg, mock_service) -> None:
        before = mock_service.select(TableQuery("enrollments", filters=(eq("id", 1),))).iloc[0]["status"]
        res = service.set_status(unconfigured_cfg, False, "enrollments", 1, "paid")
        assert not res.ok
        assert res.error.startswith("Failed to set enrollments 1 to paid")
        after = mock_service.select(TableQuery("enrollments", filters=(eq("id", 1),))).iloc[0]["status"]
        assert after == before


class TestEvents:
    FORM = {
        "title": "  Diwali Art Contest ",
        "type": "competition",
        "activity_category": "express",
        "start_date": date(2026, 10, 15),
        "end_date": date(2026, 10, 25),
        "description": "Paint the festival of lights",
        "skills": "Creativity, Confidence,",
    }

    @pytest.mark.parametrize(
        "start, end, expected",
        [
            (date(2026, 10, 1), date(2026, 10, 19), "active"),
            (date(2026, 10, 20), date(2026, 10, 30), "upcoming"),
            (date(2026, 9, 1), date(2026, 10, 18), "completed"),
        ],
    )
    def test_event_status(self, start, end, expected) -> None:
        assert service.event_status(start, end, today=date(2026, 10, 19)) == expected

    def test_payload_derives_month_status_and_skills(self) -> None:
        payload = service.build_event_payload(self.FORM, today=date(2026, 10, 19))
        assert payload["title"] == "Diwali Art Contest"
        assert payload["month_year"] == "2026-10"
        assert payload["status"] == "active"
        assert payload["start_date"] == "2026-10-15"
        assert payload["skills"] == ["Creativity", "Confidence"]

    def test_end_before_start_is_rejected(self, cfg, mock_service) -> None:
        form = dict(self.FORM, end_date=date(2026, 10, 1))
        with pytest.raises(ValueError):
            service.build_event_payload(form)
        res = service.save_event(cfg, True, form)
        assert not res.ok
        assert "End date" in res.error

    def test_create_and_edit(self, cfg, mock_service) -> None:
        before = mock_service.count(TableQuery("events"))
        assert service.save_event(cfg, True, self.FORM).ok
        assert mock_service.count(TableQuery("events")) == before + 1

        res = service.save_event(cfg, True, dict(self.FORM, title="Renamed"), event_id=2.0)
        assert res.ok
        assert res.message == "Updated event 2"
        row = mock_service.select(TableQuery("events", filters=(eq("id", 2),))).iloc[0]
        assert row["title"] == "Renamed"
        assert row["skills"] == ["Creativity", "Confidence"]

    def test_saved_event_counts_as_ending_this_week(self, cfg, mock_service) -> None:
        before = service.get_pending_stats(cfg, True, now=NOW).stats["expiring_events"]
        form = dict(self.FORM, start_date=date(2026, 10, 15), end_date=date(2026, 10, 22))
        assert service.save_event(cfg, True, form).ok

        after = service.get_pending_stats(cfg, True, now=NOW).stats["expiring_events"]
        assert after == before + 1

    def test_blank_title(self, cfg, mock_service) -> None:
        res = service.save_event(cfg, True, dict(self.FORM, title="   "))
        assert not res.ok
        assert "title is required" in res.error


class TestResources:
    def test_article_drops_url(self) -> None:
        payload = service.build_resource_payload(
            {"title": "Why is the sky blue?", "type": "article", "url": "https://x", "content": "<p>Light</p>"}
        )
        assert payload["url"] == ""
        assert payload["content"] == "<p>Light</p>"

    def test_video_drops_content(self) -> None:
        payload = service.build_resource_payload({"title": "Volcanoes", "type": "video", "url": " https://v ", "content": "x"})
        assert payload["url"] == "https://v"
        assert payload["content"] == ""

    def test_save_and_update(self, cfg, mock_service) -> None:
        before = mock_service.count(TableQuery("brainy_bites"))
        assert service.save_resource(cfg, True, {"title": "Volcanoes", "type": "video", "url": "https://v"}).ok
        assert mock_service.count(TableQuery("brainy_bites")) == before + 1
        assert service.save_resource(cfg, True, {"title": "Edited", "type": "article"}, resource_id=1).ok
        assert mock_service.select(TableQuery("brainy_bites", filters=(eq("id", 1),))).iloc[0]["title"] == "Edited"


# ── Approval + skill award ───────────────────────────────────────────────────


def _skills_tables(points: object = 20) -> dict[str, pd.DataFrame]:
    return {
        "events": pd.DataFrame([{"id": 1, "title": "Art", "skills": ["Creativity", "Confidence"]}]),
        "submissions": pd.DataFrame(
            [
                {"id": 5, "user_id": 7, "event_id": 1, "status": "pending"},
                {"id": 6, "user_id": 7, "event_id": None, "status": "pending"},
            ]
        ),
        "user_skills": pd.DataFrame(
            [{"id": 1, "user_id": 7, "skill": "Creativity", "points": points, "updated_at": "2026-10-01T00:00:00+00:00"}]
        ),
    }


class FailingSkillInserts(MockBackend):
    def insert(self, table, rows):
        if table == "user_skills":
            raise BackendError("permission denied for table user_skills", status=403)
        return super().insert(table, rows)


def _points(backend: MockBackend, user_id: int) -> dict[str, int]:
    df = backend.select(TableQuery("user_skills", filters=(eq("user_id", user_id),)))
    return {r["skill"]: int(r["points"]) for r in df.to_dict("records")}


def _status(backend: MockBackend, submission_id: int) -> str:
    return backend.select(TableQuery("submissions", filters=(eq("id", submission_id),))).iloc[0]["status"]


class TestApproveSubmission:
    def test_awards_points_per_event_skill(self, cfg, monkeypatch) -> None:
        backend = MockBackend(_skills_tables())
        monkeypatch.setattr(service, "get_mock_backend", lambda: backend)

        res = service.approve_submission(cfg, True, {"id": 5, "user_id": 7, "event_id": 1})

        assert res.ok
        assert res.message == "Approved submission 5 (skills: Creativity, Confidence)"
        assert _status(backend, 5) == "approved"
        assert _points(backend, 7) == {"Creativity": 30, "Confidence": 10}

    def test_no_event_means_no_award(self, cfg, monkeypatch) -> None:
        backend = MockBackend(_skills_tables())
        monkeypatch.setattr(service, "get_mock_backend", lambda: backend)

        res = service.approve_submission(cfg, True, {"id": 6, "user_id": 7, "event_id": float("nan")})

        assert res.ok
        assert res.message == "Approved submission 6"
        assert _points(backend, 7) == {"Creativity": 20}

    def test_partial_award_is_reported(self, cfg, monkeypatch) -> None:
        backend = FailingSkillInserts(_skills_tables())
        monkeypatch.setattr(service, "get_mock_backend", lambda: backend)

        res = service.approve_submission(cfg, True, {"id": 5, "user_id": 7, "event_id": 1})

        assert not res.ok
        assert res.message == "Approved submission 5"
        assert "['Creativity']" in res.error
        assert _status(backend, 5) == "approved"
        assert _points(backend, 7) == {"Creativity": 30}

    def test_status_failure_skips_award(self, unconfigured_cfg) -> None:
        res = service.approve_submission(unconfigured_cfg, False, {"id": 5, "user_id": 7, "event_id": 1})
        assert not res.ok
        assert res.error.startswith("Failed to approve submission")

    def test_existing_null_points_start_from_zero(self) -> None:
        backend = MockBackend(_skills_tables(points=None))
        award = service.award_skills(backend, 7, 1, now=NOW)
        assert award.awarded == ["Creativity", "Confidence"]
        assert _points(backend, 7) == {"Creativity": 10, "Confidence": 10}


@pytest.mark.parametrize(
    "value, expected",
    [(3.0, 3), (np.int64(4), 4), (float("nan"), None), (None, None), ("abc", "abc")],
)
def test_clean_id(value, expected) -> None:
    assert service.clean_id(value) == expected


# ── Certificates ─────────────────────────────────────────────────────────────


class TestCertificates:
    def test_lists_winners_then_approved_submissions(self, cfg, mock_service, tables) -> None:
        df = service.get_certificates(cfg, True).df
        n_winners = len(tables["winners"])
        n_subs = int((tables["submissions"]["status"] == "approved").sum())

        assert len(df) == n_winners + n_subs
        assert set(df["kind"].iloc[:n_winners]) == {"winner"}
        assert set(df["kind"].iloc[n_winners:]) == {"participation"}

    def test_month_filter(self, cfg, mock_service) -> None:
        everything = service.get_certificates(cfg, True).df
        month = everything["month_year"].dropna().iloc[0]
        df = service.get_certificates(cfg, True, month_year=month).df
        assert not df.empty
        assert (df["month_year"] == month).all()

    def test_single_approval_lowers_pending_count(self, cfg, mock_service, tables) -> None:
        before = service.get_pending_stats(cfg, True, now=NOW).stats["pending_certificates"]
        winner_id = tables["winners"].loc[~tables["winners"]["certificate_approved"], "id"].iloc[0]

        res = service.set_certificate(cfg, True, "winners", winner_id, True)

        assert res.ok
        assert res.message == f"Certificate for winners {winner_id} approved"
        after = service.get_pending_stats(cfg, True, now=NOW).stats["pending_certificates"]
        assert after == before - 1

    def test_revoke(self, cfg, mock_service, tables) -> None:
        before = service.get_pending_stats(cfg, True, now=NOW).stats["pending_certificates"]
        winner_id = tables["winners"].loc[tables["winners"]["certificate_approved"], "id"].iloc[0]
        assert service.set_certificate(cfg, True, "winners", winner_id, False).ok
        assert service.get_pending_stats(cfg, True, now=NOW).stats["pending_certificates"] == before + 1

    def test_bulk_approval_clears_every_waiting_certificate(self, cfg, mock_service) -> None:
        before = service.get_pending_stats(cfg, True, now=NOW).stats["pending_certificates"]
        assert before > 0

        res = service.approve_certificates(cfg, True, service.get_certificates(cfg, True).df)

        assert res.ok
        assert res.message == f"Approved {before} certificate(s)"
        assert service.get_pending_stats(cfg, True, now=NOW).stats["pending_certificates"] == 0
        assert service.get_certificates(cfg, True).df["approved"].all()

    def test_bulk_approval_with_nothing_waiting(self, cfg, mock_service) -> None:
        res = service.approve_certificates(cfg, True, pd.DataFrame())
        assert res.ok
        assert res.message == "No certificates waiting for approval"

    def test_other_tables_are_refused(self, cfg, mock_service) -> None:
        res = service.set_certificate(cfg, True, "profiles", 1, True)
        assert not res.ok
        assert "unknown table" in res.error

    def test_bulk_write_failure_is_reported(self, unconfigured_cfg, mock_service) -> None:
        df = service.get_certificates(unconfigured_cfg, True).df
        res = service.approve_certificates(unconfigured_cfg, False, df)
        assert not res.ok
        assert res.error.startswith("Failed to approve certificates")


# ── Hall of Fame selection ───────────────────────────────────────────────────


def _hall_tables() -> dict[str, pd.DataFrame]:
    return {
        "profiles": pd.DataFrame([{"id": 5, "full_name": "Asha Rao"}, {"id": 6, "full_name": "Kabir Das"}]),
        "events": pd.DataFrame(
            [
                {"id": 1, "title": "Diwali Art Contest", "month_year": "2026-10", "activity_category": "express"},
                {"id": 2, "title": "Story Sprint", "month_year": "2026-09", "activity_category": "challenge"},
            ]
        ),
        "submissions": pd.DataFrame(
            [
                {"id": 10, "user_id": 5, "event_id": 1, "category": "art", "status": "approved", "created_at": "2026-10-02T10:00:00+00:00"},
                {"id": 11, "user_id": 6, "event_id": 1, "category": None, "status": "pending", "created_at": "2026-10-03T10:00:00+00:00"},
                {"id": 12, "user_id": 6, "event_id": 2, "category": "storytelling", "status": "approved", "created_at": "2026-09-03T10:00:00+00:00"},
            ]
        ),
        "winners": pd.DataFrame(
            [
                {"id": 1, "event_id": 1, "user_id": 5, "submission_id": 10, "prize_type": "second", "status": "draft",
                 "created_at": "2026-10-05T09:00:00+00:00"},
                {"id": 2, "event_id": 2, "user_id": 6, "submission_id": 12, "prize_type": "first", "status": "published",
                 "created_at": "2026-09-05T09:00:00+00:00"},
            ]
        ),
    }


class TestHallOfFame:
    @pytest.fixture
    def hall(self, monkeypatch) -> MockBackend:
        backend = MockBackend(_hall_tables())
        monkeypatch.setattr(service, "get_mock_backend", lambda: backend)
        return backend

    @staticmethod
    def _event(backend: MockBackend, event_id: int) -> dict:
        return backend.select(TableQuery("events", filters=(eq("id", event_id),))).iloc[0].to_dict()

    def test_event_submissions_embed_creator(self, cfg, hall) -> None:
        df = service.get_event_submissions(cfg, True, 1).df
        assert df["id"].tolist() == [11, 10]
        assert df.loc[0, "profiles"] == {"full_name": "Kabir Das"}

    def test_build_rows_take_month_from_event(self, cfg, hall) -> None:
        subs = service.get_event_submissions(cfg, True, 1).df
        rows = service.build_winner_rows(self._event(hall, 1), {10: "first", 11.0: "peoples_choice"}, subs)
        assert rows == [
            {
                "event_id": 1, "user_id": 5, "submission_id": 10, "category": "art", "prize_type": "first",
                "month": 10, "year": 2026, "status": "draft", "certificate_approved": False,
            },
            {
                "event_id": 1, "user_id": 6, "submission_id": 11, "category": "express", "prize_type": "peoples_choice",
                "month": 10, "year": 2026, "status": "draft", "certificate_approved": False,
            },
        ]

    @pytest.mark.parametrize(
        "picks, status, message",
        [
            ({10: "gold"}, "draft", "Unknown prize type"),
            ({12: "first"}, "draft", "not part of this event"),
            ({10: "first"}, "archived", "Unknown winner status"),
        ],
    )
    def test_invalid_selection_is_refused(self, cfg, hall, picks, status, message) -> None:
        subs = service.get_event_submissions(cfg, True, 1).df
        res = service.save_winners(cfg, True, self._event(hall, 1), picks, subs, status=status)
        assert not res.ok
        assert message in res.error
        assert hall.count(TableQuery("winners")) == 2

    def test_event_without_month_is_refused(self, cfg, hall) -> None:
        subs = service.get_event_submissions(cfg, True, 1).df
        event = dict(self._event(hall, 1), month_year=None)
        res = service.save_winners(cfg, True, event, {10: "first"}, subs)
        assert not res.ok
        assert "month_year" in res.error

    def test_publish_replaces_only_this_events_winners(self, cfg, hall) -> None:
        subs = service.get_event_submissions(cfg, True, 1).df
        res = service.save_winners(cfg, True, self._event(hall, 1), {10: "first", 11: "second"}, subs, status="published")

        assert res.ok
        assert res.message == "Published 2 winner(s) for Diwali Art Contest"
        mine = service.get_event_winners(cfg, True, 1).df
        assert sorted(mine["submission_id"].tolist()) == [10, 11]
        assert set(mine["status"]) == {"published"}
        other = service.get_event_winners(cfg, True, 2).df
        assert other["submission_id"].tolist() == [12]

    def test_new_winners_wait_for_a_certificate(self, cfg, hall) -> None:
        subs = service.get_event_submissions(cfg, True, 1).df
        assert service.save_winners(cfg, True, self._event(hall, 1), {11: "first"}, subs).ok
        certs = service.get_certificates(cfg, True).df
        mine = certs[(certs["table"] == "winners") & (certs["row_id"] == 3)]
        assert mine["approved"].tolist() == [False]
        assert mine["name"].tolist() == ["Kabir Das"]

    def test_empty_selection_clears_winners(self, cfg, hall) -> None:
        subs = service.get_event_submissions(cfg, True, 1).df
        res = service.save_winners(cfg, True, self._event(hall, 1), {}, subs)
        assert res.ok
        assert res.message == "Saved draft of 0 winner(s) for Diwali Art Contest"
        assert service.get_event_winners(cfg, True, 1).df.empty
