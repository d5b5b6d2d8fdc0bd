"""
Query builders.

Each function describes one dataset a view needs as a `TableQuery`; the
client (live or mock) decides how to run it. No I/O happens here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

FILTER_OPS = ("eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "in", "is")

TABLES = (
    "profiles",
    "enrollments",
    "submissions",
    "events",
    "comments",
    "invoices",
    "brainy_bites",
    "winners",
    "user_skills",
)


def _render_scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator: {self.op}")

    def to_param(self) -> tuple[str, str]:
        if self.op == "in":
            values = ",".join(_render_scalar(v) for v in self.value)
            return self.column, f"in.({values})"
        return self.column, f"{self.op}.{_render_scalar(self.value)}"


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True

    def to_param(self) -> str:
        return f"{self.column}.{'asc' if self.ascending else 'desc'}"


@dataclass(frozen=True)
class TableQuery:
    table: str
    select: str = "*"
    filters: tuple[Filter, ...] = field(default_factory=tuple)
    order: tuple[Order, ...] = field(default_factory=tuple)
    limit: Optional[int] = None

    def to_params(self) -> list[tuple[str, str]]:
        """PostgREST query parameters, in a stable order."""
        params: list[tuple[str, str]] = [("select", "".join(self.select.split()))]
        params.extend(f.to_param() for f in self.filters)
        if self.order:
            params.append(("order", ",".join(o.to_param() for o in self.order)))
        if self.limit is not None:
            params.append(("limit", str(self.limit)))
        return params


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def newest_first(column: str = "created_at") -> tuple[Order, ...]:
    return (Order(column, ascending=False),)


# --- admin dashboard ---


def q_invoices_with_activity() -> TableQuery:
    return TableQuery("invoices", select="amount, enrollments(activity_type)")


def q_enrollment_activity_types() -> TableQuery:
    return TableQuery("enrollments", select="activity_type")


def q_pending_submissions() -> TableQuery:
    return TableQuery("submissions", filters=(eq("status", "pending"),), order=newest_first())


def q_count_pending_submissions() -> TableQuery:
    return TableQuery("submissions", filters=(eq("status", "pending"),))


def q_count_uncertified_submissions() -> TableQuery:
    # approved participants still waiting on a certificate
    return TableQuery(
        "submissions",
        filters=(eq("status", "approved"), eq("certificate_approved", False)),
    )


def q_count_uncertified_winners() -> TableQuery:
    return TableQuery("winners", filters=(eq("certificate_approved", False),))


def q_count_expiring_events(now: Optional[datetime] = None, days: int = 7) -> TableQuery:
    now = now or datetime.now(timezone.utc)
    return TableQuery(
        "events",
        filters=(
            Filter("end_date", "gt", now),
            Filter("end_date", "lt", now + timedelta(days=days)),
        ),
    )


# --- analytics ---


def q_count_table(table: str) -> TableQuery:
    return TableQuery(table)


def q_count_active_events() -> TableQuery:
    return TableQuery("events", filters=(eq("status", "active"),))


def q_profile_signups() -> TableQuery:
    return TableQuery("profiles", select="created_at", order=(Order("created_at"),))


def q_profile_schools() -> TableQuery:
    return TableQuery("profiles", select="school_name")


def q_submission_categories() -> TableQuery:
    return TableQuery("submissions", select="category")


# --- admin lists ---


def q_submissions(status: Optional[str] = None) -> TableQuery:
    filters = (eq("status", status),) if status else ()
    return TableQuery("submissions", select="*, events(title)", filters=filters, order=newest_first())


def q_enrollments() -> TableQuery:
    return TableQuery("enrollments", order=newest_first())


def q_profiles() -> TableQuery:
    return TableQuery("profiles", order=newest_first())


def q_events(status: Optional[str] = None, category: Optional[str] = None) -> TableQuery:
    filters: tuple[Filter, ...] = ()
    if status:
        filters += (eq("status", status),)
    if category:
        filters += (eq("activity_category", category),)
    return TableQuery("events", filters=filters, order=(Order("date"),))


def q_event_months() -> TableQuery:
    return TableQuery("events", select="month_year", order=(Order("month_year", ascending=False),))


def q_events_by_month(month_year: Optional[str] = None) -> TableQuery:
    filters = (eq("month_year", month_year),) if month_year else ()
    return TableQuery("events", filters=filters, order=(Order("start_date", ascending=False),))


def q_resources() -> TableQuery:
    return TableQuery("brainy_bites", order=newest_first())


def q_pending_comments() -> TableQuery:
    return TableQuery(
        "comments",
        select="*, user:user_id(full_name, email), submission:submission_id(description, file_url)",
        filters=(eq("status", "pending"),),
        order=newest_first(),
    )


def q_gallery_submissions(approved_only: bool = False) -> TableQuery:
    filters = (eq("status", "approved"),) if approved_only else ()
    return TableQuery("submissions", select="*, events(title)", filters=filters, order=newest_first())


CERTIFICATE_SELECT = "*, events(title, month_year, activity_category), profiles:user_id(full_name)"


def q_certificate_submissions() -> TableQuery:
    # participation certificates go to approved submissions only
    return TableQuery(
        "submissions",
        select=CERTIFICATE_SELECT,
        filters=(eq("status", "approved"),),
        order=newest_first(),
    )


def q_certificate_winners() -> TableQuery:
    return TableQuery("winners", select=CERTIFICATE_SELECT, order=newest_first())


def q_event_submissions(event_id: Any) -> TableQuery:
    return TableQuery(
        "submissions",
        select="*, profiles:user_id(full_name)",
        filters=(eq("event_id", event_id),),
        order=newest_first(),
    )


def q_event_winners(event_id: Any) -> TableQuery:
    return TableQuery("winners", filters=(eq("event_id", event_id),), order=(Order("id"),))


def q_event_skills(event_id: Any) -> TableQuery:
    return TableQuery("events", select="skills", filters=(eq("id", event_id),), limit=1)


def q_user_skill(user_id: Any, skill: str) -> TableQuery:
    return TableQuery("user_skills", filters=(eq("user_id", user_id), eq("skill", skill)), limit=1)


# --- public site ---


def q_winners(year: int, month: Optional[int] = None, category: Optional[str] = None) -> TableQuery:
    filters: tuple[Filter, ...] = (eq("year", year),)
    if month:
        filters += (eq("month", month),)
    if category:
        filters += (eq("category", category),)
    return TableQuery(
        "winners",
        select="*, profiles:user_id(full_name), submissions:submission_id(description, file_url)",
        filters=filters,
        order=newest_first(),
    )


def q_leaderboard(limit: int = 10) -> TableQuery:
    return TableQuery(
        "profiles",
        select="full_name, xp, avatar_url",
        order=(Order("xp", ascending=False),),
        limit=limit,
    )
