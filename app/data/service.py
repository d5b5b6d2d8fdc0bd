from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional, Protocol, Sequence

import pandas as pd

from config import AppConfig
from data import aggregations, queries
from data.connection import get_rest_client
from data.mock_data import get_mock_backend
from data.queries import Filter, TableQuery

logger = logging.getLogger(__name__)

SKILL_POINTS = 10


class TableClient(Protocol):
    def select(self, query: TableQuery) -> pd.DataFrame: ...

    def count(self, query: TableQuery) -> int: ...

    def insert(self, table: str, rows: list[dict[str, Any]]) -> pd.DataFrame: ...

    def update(self, table: str, values: dict[str, Any], filters: Sequence[Filter]) -> pd.DataFrame: ...

    def delete(self, table: str, filters: Sequence[Filter]) -> int: ...

    def storage_public_url(self, bucket: str, path: str) -> str: ...


@dataclass(frozen=True)
class DataResult:
    df: pd.DataFrame
    source: str  # "mock" | "backend"
    warning: str | None = None


@dataclass(frozen=True)
class StatsResult:
    stats: dict[str, Any]
    source: str
    warning: str | None = None


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str = ""
    error: str | None = None


def get_client(cfg: AppConfig, use_mock: bool) -> TableClient:
    return get_mock_backend() if use_mock else get_rest_client(cfg)


def _fallback(cfg: AppConfig, use_mock: bool, fn: Callable[[TableClient], Any], empty: Callable[[], Any]) -> tuple[Any, str, str | None]:
    if use_mock:
        return fn(get_mock_backend()), "mock", None
    try:
        return fn(get_rest_client(cfg)), "backend", None
    except Exception as e:
        logger.warning("Backend read failed: %s: %s", type(e).__name__, e)
        if cfg.fallback_to_mock:
            return fn(get_mock_backend()), "mock", f"Fell back to mock data: {type(e).__name__}"
        return empty(), "backend", f"Could not load data: {type(e).__name__}"


def _frame(cfg: AppConfig, use_mock: bool, fn: Callable[[TableClient], pd.DataFrame]) -> DataResult:
    df, source, warning = _fallback(cfg, use_mock, fn, pd.DataFrame)
    return DataResult(df=df, source=source, warning=warning)


def _stats(cfg: AppConfig, use_mock: bool, fn: Callable[[TableClient], dict[str, Any]]) -> StatsResult:
    stats, source, warning = _fallback(cfg, use_mock, fn, dict)
    return StatsResult(stats=stats, source=source, warning=warning)


def _write(cfg: AppConfig, use_mock: bool, what: str, fn: Callable[[TableClient], str]) -> ActionResult:
    try:
        message = fn(get_client(cfg, use_mock))
    except Exception as e:
        logger.exception("Error %s", what)
        return ActionResult(ok=False, error=f"Failed to {what}: {e}")
    logger.info("%s (%s)", message, "mock" if use_mock else "backend")
    return ActionResult(ok=True, message=message)


def clean_id(value: Any) -> Any:
    """Row ids can surface as floats when a frame column holds nulls."""
    if value is None:
        return None
    if isinstance(value, float):
        if pd.isna(value):
            return None
        if value.is_integer():
            return int(value)
    if hasattr(value, "item"):
        return value.item()
    return value


# --- admin dashboard ---


def get_revenue_breakdown(cfg: AppConfig, use_mock: bool) -> StatsResult:
    def fn(client: TableClient) -> dict[str, Any]:
        b = aggregations.revenue_by_category(client.select(queries.q_invoices_with_activity()))
        return {"total": b.total, "rows": b.rows}

    return _stats(cfg, use_mock, fn)


def get_registration_breakdown(cfg: AppConfig, use_mock: bool) -> StatsResult:
    def fn(client: TableClient) -> dict[str, Any]:
        b = aggregations.registrations_by_activity(client.select(queries.q_enrollment_activity_types()))
        return {"total": b.total, "rows": b.rows}

    return _stats(cfg, use_mock, fn)


def get_pending_stats(cfg: AppConfig, use_mock: bool, now: Optional[datetime] = None) -> StatsResult:
    def fn(client: TableClient) -> dict[str, Any]:
        return {
            "pending_submissions": client.count(queries.q_count_pending_submissions()),
            "pending_certificates": client.count(queries.q_count_uncertified_submissions())
            + client.count(queries.q_count_uncertified_winners()),
            "expiring_events": client.count(queries.q_count_expiring_events(now=now)),
        }

    return _stats(cfg, use_mock, fn)


def get_pending_submissions(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_pending_submissions()))


# --- analytics ---


def get_analytics_stats(cfg: AppConfig, use_mock: bool) -> StatsResult:
    def fn(client: TableClient) -> dict[str, Any]:
        return {
            "total_users": client.count(queries.q_count_table("profiles")),
            "total_submissions": client.count(queries.q_count_table("submissions")),
            "active_events": client.count(queries.q_count_active_events()),
            "total_schools": aggregations.count_schools(client.select(queries.q_profile_schools())),
        }

    return _stats(cfg, use_mock, fn)


def get_signup_trend(cfg: AppConfig, use_mock: bool, days: int = 7) -> DataResult:
    return _frame(
        cfg,
        use_mock,
        lambda c: aggregations.signups_by_day(c.select(queries.q_profile_signups()), days=days, tz=cfg.timezone),
    )


def get_submission_categories(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _frame(cfg, use_mock, lambda c: aggregations.submissions_by_category(c.select(queries.q_submission_categories())))


def get_top_schools(cfg: AppConfig, use_mock: bool, n: int = 5) -> DataResult:
    return _frame(cfg, use_mock, lambda c: aggregations.top_schools(c.select(queries.q_profile_schools()), n=n))


# --- admin lists ---


def get_submissions(cfg: AppConfig, use_mock: bool, status: Optional[str] = None) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_submissions(status)))


def get_enrollments(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_enrollments()))


def get_profiles(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_profiles()))


def get_events(cfg: AppConfig, use_mock: bool, status: Optional[str] = None, category: Optional[str] = None) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_events(status=status, category=category)))


def get_event_months(cfg: AppConfig, use_mock: bool) -> list[str]:
    res = _frame(cfg, use_mock, lambda c: c.select(queries.q_event_months()))
    return aggregations.unique_months(res.df)


def get_events_by_month(cfg: AppConfig, use_mock: bool, month_year: Optional[str] = None) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_events_by_month(month_year)))


def get_resources(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_resources()))


def get_pending_comments(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_pending_comments()))


def get_gallery_submissions(cfg: AppConfig, use_mock: bool, approved_only: bool = False) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_gallery_submissions(approved_only)))


def get_certificates(cfg: AppConfig, use_mock: bool, month_year: Optional[str] = None) -> DataResult:
    def fn(client: TableClient) -> pd.DataFrame:
        df = aggregations.certificate_rows(
            client.select(queries.q_certificate_submissions()),
            client.select(queries.q_certificate_winners()),
        )
        if month_year:
            df = df[df["month_year"] == month_year].reset_index(drop=True)
        return df

    return _frame(cfg, use_mock, fn)


def get_event_submissions(cfg: AppConfig, use_mock: bool, event_id: Any) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_event_submissions(clean_id(event_id))))


def get_event_winners(cfg: AppConfig, use_mock: bool, event_id: Any) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_event_winners(clean_id(event_id))))


# --- public site ---


def get_winners(
    cfg: AppConfig,
    use_mock: bool,
    year: int,
    month: Optional[int] = None,
    category: Optional[str] = None,
) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_winners(year, month=month, category=category)))


def get_leaderboard(cfg: AppConfig, use_mock: bool, limit: int = 10) -> DataResult:
    return _frame(cfg, use_mock, lambda c: c.select(queries.q_leaderboard(limit)))


def file_url(cfg: AppConfig, use_mock: bool, path: Optional[str]) -> Optional[str]:
    if not path or not isinstance(path, str):
        return None
    return get_client(cfg, use_mock).storage_public_url(cfg.storage_bucket, path)


# --- writes ---


def set_status(cfg: AppConfig, use_mock: bool, table: str, row_id: Any, status: str) -> ActionResult:
    row_id = clean_id(row_id)

    def fn(client: TableClient) -> str:
        client.update(table, {"status": status}, [queries.eq("id", row_id)])
        return f"{table} {row_id} marked {status}"

    return _write(cfg, use_mock, f"set {table} {row_id} to {status}", fn)


def delete_row(cfg: AppConfig, use_mock: bool, table: str, row_id: Any) -> ActionResult:
    row_id = clean_id(row_id)

    def fn(client: TableClient) -> str:
        deleted = client.delete(table, [queries.eq("id", row_id)])
        return f"Deleted {deleted} row(s) from {table}"

    return _write(cfg, use_mock, f"delete {table} {row_id}", fn)


def event_status(start: date, end: date, today: Optional[date] = None) -> str:
    today = today or date.today()
    if start <= today <= end:
        return "active"
    return "upcoming" if start > today else "completed"


def build_event_payload(form: dict[str, Any], today: Optional[date] = None) -> dict[str, Any]:
    start: date = form["start_date"]
    end: date = form.get("end_date") or start
    if end < start:
        raise ValueError("End date must be on or after the start date")
    return {
        "title": form["title"].strip(),
        "type": form.get("type") or "competition",
        "activity_category": form.get("activity_category") or None,
        "date": start.isoformat(),
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "month_year": start.strftime("%Y-%m"),
        "status": event_status(start, end, today),
        "description": form.get("description") or "",
        "icon": form.get("icon") or "",
        "color": form.get("color") or "",
        "formats": form.get("formats") or "",
        "skills": aggregations.split_csv(form.get("skills")),
    }


def save_event(cfg: AppConfig, use_mock: bool, form: dict[str, Any], event_id: Any = None) -> ActionResult:
    try:
        payload = build_event_payload(form)
    except (KeyError, ValueError) as e:
        return ActionResult(ok=False, error=f"Failed to save event: {e}")
    if not payload["title"]:
        return ActionResult(ok=False, error="Failed to save event: title is required")

    event_id = clean_id(event_id)

    def fn(client: TableClient) -> str:
        if event_id is not None:
            client.update("events", payload, [queries.eq("id", event_id)])
            return f"Updated event {event_id}"
        client.insert("events", [payload])
        return f"Created event '{payload['title']}'"

    return _write(cfg, use_mock, "save event", fn)


def build_resource_payload(form: dict[str, Any]) -> dict[str, Any]:
    kind = form.get("type") or "video"
    return {
        "title": (form.get("title") or "").strip(),
        "type": kind,
        "url": (form.get("url") or "").strip() if kind == "video" else "",
        "content": (form.get("content") or "") if kind != "video" else "",
        "description": form.get("description") or "",
        "icon": form.get("icon") or "",
    }


def save_resource(cfg: AppConfig, use_mock: bool, form: dict[str, Any], resource_id: Any = None) -> ActionResult:
    payload = build_resource_payload(form)
    if not payload["title"]:
        return ActionResult(ok=False, error="Failed to save resource: title is required")

    resource_id = clean_id(resource_id)

    def fn(client: TableClient) -> str:
        if resource_id is not None:
            client.update("brainy_bites", payload, [queries.eq("id", resource_id)])
            return f"Updated resource {resource_id}"
        client.insert("brainy_bites", [payload])
        return f"Created resource '{payload['title']}'"

    return _write(cfg, use_mock, "save resource", fn)


@dataclass
class SkillAward:
    awarded: list[str] = field(default_factory=list)


def award_skills(
    client: TableClient,
    user_id: Any,
    event_id: Any,
    result: Optional[SkillAward] = None,
    now: Optional[datetime] = None,
) -> SkillAward:
    """
    Add SKILL_POINTS to every skill the event teaches.

    Each skill is its own read + write; a failure stops the loop and leaves
    earlier awards in place (recorded in `result.awarded`).
    """
    result = result if result is not None else SkillAward()
    events = client.select(queries.q_event_skills(event_id))
    if events.empty or "skills" not in events.columns:
        return result
    skills = events.iloc[0]["skills"]
    if not isinstance(skills, (list, tuple)):
        return result

    stamp = (now or datetime.now(timezone.utc)).isoformat()
    for skill in skills:
        existing = client.select(queries.q_user_skill(user_id, skill))
        if existing.empty:
            client.insert("user_skills", [{"user_id": user_id, "skill": skill, "points": SKILL_POINTS}])
        else:
            row = existing.iloc[0]
            current = pd.to_numeric(row.get("points"), errors="coerce")
            points = (0 if pd.isna(current) else int(current)) + SKILL_POINTS
            client.update(
                "user_skills",
                {"points": points, "updated_at": stamp},
                [queries.eq("id", clean_id(row["id"]))],
            )
        result.awarded.append(str(skill))
    return result


def approve_submission(cfg: AppConfig, use_mock: bool, submission: dict[str, Any]) -> ActionResult:
    submission_id = clean_id(submission.get("id"))
    user_id = clean_id(submission.get("user_id"))
    event_id = clean_id(submission.get("event_id"))
    client = get_client(cfg, use_mock)

    try:
        client.update("submissions", {"status": "approved"}, [queries.eq("id", submission_id)])
    except Exception as e:
        logger.exception("Error approving submission %s", submission_id)
        return ActionResult(ok=False, error=f"Failed to approve submission: {e}")

    if event_id is None or user_id is None:
        return ActionResult(ok=True, message=f"Approved submission {submission_id}")

    award = SkillAward()
    try:
        award_skills(client, user_id, event_id, result=award)
    except Exception as e:
        logger.exception("Skill award failed for submission %s after %s", submission_id, award.awarded)
        return ActionResult(
            ok=False,
            message=f"Approved submission {submission_id}",
            error=f"Submission approved but awarding skills failed after {award.awarded or 'no skills'}: {e}",
        )

    skills = ", ".join(award.awarded) or "none"
    logger.info("Approved submission %s, skills awarded: %s", submission_id, skills)
    return ActionResult(ok=True, message=f"Approved submission {submission_id} (skills: {skills})")


# --- certificates & hall of fame ---

CERTIFICATE_TABLES = ("submissions", "winners")
WINNER_STATUSES = ("draft", "published")


def set_certificate(cfg: AppConfig, use_mock: bool, table: str, row_id: Any, approved: bool) -> ActionResult:
    if table not in CERTIFICATE_TABLES:
        return ActionResult(ok=False, error=f"Failed to update certificate: unknown table {table}")
    row_id = clean_id(row_id)

    def fn(client: TableClient) -> str:
        client.update(table, {"certificate_approved": bool(approved)}, [queries.eq("id", row_id)])
        return f"Certificate for {table} {row_id} {'approved' if approved else 'revoked'}"

    return _write(cfg, use_mock, f"update certificate for {table} {row_id}", fn)


def approve_certificates(cfg: AppConfig, use_mock: bool, certificates: pd.DataFrame) -> ActionResult:
    """Approve every listed certificate not yet approved: one update per table."""
    waiting = aggregations.unapproved_ids(certificates)
    if not waiting:
        return ActionResult(ok=True, message="No certificates waiting for approval")

    def fn(client: TableClient) -> str:
        done = 0
        for table, ids in waiting.items():
            if table not in CERTIFICATE_TABLES:
                raise ValueError(f"unknown table {table}")
            ids = [clean_id(i) for i in ids]
            client.update(table, {"certificate_approved": True}, [Filter("id", "in", ids)])
            done += len(ids)
        return f"Approved {done} certificate(s)"

    return _write(cfg, use_mock, "approve certificates", fn)


def build_winner_rows(
    event: dict[str, Any],
    picks: dict[Any, str],
    submissions: pd.DataFrame,
    status: str = "draft",
) -> list[dict[str, Any]]:
    """
    Winner rows for one event from {submission_id: prize_type}.

    Month and year come from the event's `month_year`; the category is the
    submission's own, falling back to the event's program.
    """
    if status not in WINNER_STATUSES:
        raise ValueError(f"Unknown winner status: {status}")
    try:
        year, month = (int(part) for part in str(event.get("month_year") or "").split("-"))
    except ValueError:
        raise ValueError("Event has no valid month_year") from None

    by_id = {clean_id(s["id"]): s for s in submissions.to_dict("records")} if not submissions.empty else {}
    rows = []
    for submission_id, prize in picks.items():
        if prize not in aggregations.PRIZE_LABELS:
            raise ValueError(f"Unknown prize type: {prize}")
        sub = by_id.get(clean_id(submission_id))
        if sub is None:
            raise ValueError(f"Submission {submission_id} is not part of this event")
        category = sub.get("category")
        if not isinstance(category, str) or not category:
            category = event.get("activity_category")
        rows.append(
            {
                "event_id": clean_id(event.get("id")),
                "user_id": clean_id(sub.get("user_id")),
                "submission_id": clean_id(sub["id"]),
                "category": category,
                "prize_type": prize,
                "month": month,
                "year": year,
                "status": status,
                "certificate_approved": False,
            }
        )
    return rows


def save_winners(
    cfg: AppConfig,
    use_mock: bool,
    event: dict[str, Any],
    picks: dict[Any, str],
    submissions: pd.DataFrame,
    status: str = "draft",
) -> ActionResult:
    """
    Replace the event's winners with `picks`.

    Delete then insert, as two calls: if the insert fails the event is left
    with no winners and the error says so.
    """
    try:
        rows = build_winner_rows(event, picks, submissions, status=status)
    except ValueError as e:
        return ActionResult(ok=False, error=f"Failed to save winners: {e}")
    event_id = clean_id(event.get("id"))

    def fn(client: TableClient) -> str:
        client.delete("winners", [queries.eq("event_id", event_id)])
        if rows:
            client.insert("winners", rows)
        verb = "Published" if status == "published" else "Saved draft of"
        return f"{verb} {len(rows)} winner(s) for {event.get('title') or f'event {event_id}'}"

    return _write(cfg, use_mock, f"save winners for event {event_id}", fn)
