"""
Aggregation helpers: pure reducers that turn query results into chart-ready
frames. No I/O, no Streamlit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

import pandas as pd

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

PRIZE_LABELS = {
    "first": "🥇 First Place",
    "second": "🥈 Second Place",
    "peoples_choice": "❤️ People's Choice",
    "participation": "⭐ Participation Award",
}

PROGRAM_LABELS = {
    "challenge": "Challenge Yourself",
    "express": "Express Yourself",
    "brainy": "Brainy Bites",
}


@dataclass(frozen=True)
class Breakdown:
    total: float
    rows: pd.DataFrame


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series([None] * len(df), index=df.index, dtype=object)


def _label_or(series: pd.Series, fallback: str) -> pd.Series:
    def _clean(v: Any) -> str:
        if v is None or (isinstance(v, float) and pd.isna(v)):
            return fallback
        text = str(v)
        return text if text.strip() else fallback

    return series.map(_clean).astype(object)


def embedded_field(value: Any, key: str) -> Any:
    """Read `key` from an embedded resource (a dict, a one-item list, or null)."""
    if isinstance(value, list):
        value = value[0] if value else None
    return value.get(key) if isinstance(value, dict) else None


def _embedded(series: pd.Series, key: str) -> pd.Series:
    return series.map(lambda v: embedded_field(v, key))


def revenue_by_category(invoices: pd.DataFrame) -> Breakdown:
    """
    Sum invoice amounts per enrollment activity type.

    Unparsable amounts count as 0; invoices without an embedded enrollment
    land in "Unknown". Groups keep first-seen order.
    """
    if invoices.empty:
        return Breakdown(total=0.0, rows=pd.DataFrame({"type": [], "amount": []}))

    amounts = pd.to_numeric(_column(invoices, "amount"), errors="coerce").fillna(0.0).astype(float)
    types = _label_or(_embedded(_column(invoices, "enrollments"), "activity_type"), "Unknown")
    rows = (
        pd.DataFrame({"type": types, "amount": amounts})
        .groupby("type", sort=False, as_index=False)["amount"]
        .sum()
    )
    return Breakdown(total=float(amounts.sum()), rows=rows)


def registrations_by_activity(enrollments: pd.DataFrame) -> Breakdown:
    total = int(len(enrollments))
    if total == 0:
        return Breakdown(total=0, rows=pd.DataFrame({"type": [], "count": [], "share": []}))

    types = _label_or(_column(enrollments, "activity_type"), "Unknown")
    rows = types.groupby(types, sort=False).size().rename("count").reset_index()
    rows.columns = ["type", "count"]
    rows["share"] = rows["count"] / total * 100
    return Breakdown(total=total, rows=rows)


def signups_by_day(profiles: pd.DataFrame, days: int = 7, tz: str = "UTC") -> pd.DataFrame:
    """Signups per local calendar day, ascending, keeping the last `days` days that had any."""
    created = pd.to_datetime(_column(profiles, "created_at"), utc=True, errors="coerce", format="ISO8601").dropna()
    if created.empty:
        return pd.DataFrame({"date": [], "users": []})

    local_dates = created.dt.tz_convert(tz).dt.date
    counts = local_dates.value_counts().sort_index()
    out = counts.rename("users").rename_axis("date").reset_index()
    return out.tail(days).reset_index(drop=True)


def category_label(value: Optional[str]) -> str:
    return str(value or "Uncategorized").replace("_", " ").upper()


def submissions_by_category(submissions: pd.DataFrame) -> pd.DataFrame:
    if submissions.empty:
        return pd.DataFrame({"name": [], "value": []})

    cats = _label_or(_column(submissions, "category"), "Uncategorized")
    counts = cats.groupby(cats, sort=False).size()
    return pd.DataFrame(
        {"name": [category_label(c) for c in counts.index], "value": counts.to_numpy()}
    )


def _school_names(profiles: pd.DataFrame) -> pd.Series:
    names = _column(profiles, "school_name")
    names = names[names.notna()].astype(str)
    return names[names.str.strip() != ""]


def top_schools(profiles: pd.DataFrame, n: int = 5) -> pd.DataFrame:
    names = _school_names(profiles)
    if names.empty:
        return pd.DataFrame({"name": [], "students": []})

    counts = names.groupby(names, sort=False).size()
    out = pd.DataFrame({"name": counts.index.to_list(), "students": counts.to_numpy()})
    out = out.sort_values("students", ascending=False, kind="stable")
    return out.head(n).reset_index(drop=True)


def count_schools(profiles: pd.DataFrame) -> int:
    return int(_school_names(profiles).nunique())


def pending_total(stats: Mapping[str, int]) -> int:
    return int(sum(stats.get(k, 0) for k in ("pending_submissions", "pending_certificates", "expiring_events")))


def has_pending_actions(stats: Mapping[str, int]) -> bool:
    return pending_total(stats) > 0


def group_winners_by_month(winners: pd.DataFrame) -> dict[str, pd.DataFrame]:
    groups: dict[str, pd.DataFrame] = {}
    if winners.empty:
        return groups

    keys = [
        f"{MONTHS[int(m) - 1]} {int(y)}" if pd.notna(m) and 1 <= int(m) <= 12 else "Unknown"
        for m, y in zip(_column(winners, "month"), _column(winners, "year"))
    ]
    for key in dict.fromkeys(keys):
        mask = [k == key for k in keys]
        groups[key] = winners[mask].reset_index(drop=True)
    return groups


def search_rows(df: pd.DataFrame, term: str, columns: Sequence[str]) -> pd.DataFrame:
    """Case-insensitive substring match on any of `columns`."""
    term = (term or "").strip().lower()
    if not term or df.empty:
        return df

    mask = pd.Series(False, index=df.index)
    for col in columns:
        text = _column(df, col)
        text = text.where(text.notna(), "").astype(str).str.lower()
        mask |= text.str.contains(term, regex=False)
    return df[mask]


CERTIFICATE_COLUMNS = ["table", "row_id", "kind", "name", "event", "month_year", "approved", "created_at"]


def _certificates(df: pd.DataFrame, table: str, kind: str) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=CERTIFICATE_COLUMNS)
    return pd.DataFrame(
        {
            "table": table,
            "row_id": _column(df, "id").tolist(),
            "kind": kind,
            "name": _embedded(_column(df, "profiles"), "full_name").fillna("Unknown").tolist(),
            "event": _embedded(_column(df, "events"), "title").fillna("No event").tolist(),
            "month_year": _embedded(_column(df, "events"), "month_year").tolist(),
            "approved": _column(df, "certificate_approved").fillna(False).astype(bool).tolist(),
            "created_at": _column(df, "created_at").tolist(),
        },
        columns=CERTIFICATE_COLUMNS,
    )


def certificate_rows(submissions: pd.DataFrame, winners: pd.DataFrame) -> pd.DataFrame:
    """Winner certificates first, then participation certificates."""
    parts = [_certificates(winners, "winners", "winner"), _certificates(submissions, "submissions", "participation")]
    parts = [p for p in parts if not p.empty]
    if not parts:
        return pd.DataFrame(columns=CERTIFICATE_COLUMNS)
    return pd.concat(parts, ignore_index=True)


def unapproved_ids(certificates: pd.DataFrame) -> dict[str, list[Any]]:
    """Row ids still waiting on a certificate, grouped by table."""
    if certificates.empty:
        return {}
    waiting = certificates[~certificates["approved"].astype(bool)]
    return {table: group["row_id"].tolist() for table, group in waiting.groupby("table", sort=False)}


def unique_months(events: pd.DataFrame) -> list[str]:
    months = _column(events, "month_year")
    return [m for m in dict.fromkeys(months.tolist()) if isinstance(m, str) and m]


def activity_label(value: Optional[str]) -> str:
    if not value:
        return "Unknown"
    return str(value).replace("_", " ").title()


def program_label(value: Optional[str]) -> str:
    return PROGRAM_LABELS.get(str(value), str(value or "Other"))


def prize_label(prize_type: Optional[str]) -> str:
    return PRIZE_LABELS.get(str(prize_type), str(prize_type or ""))


def format_inr(amount: float) -> str:
    """₹ with Indian digit grouping (12,34,567) and no decimals."""
    value = int(round(float(amount or 0)))
    sign = "-" if value < 0 else ""
    digits = str(abs(value))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])
    return f"{sign}₹{digits}"


def split_csv(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return [part.strip() for part in str(text).split(",") if part.strip()]


def join_csv(values: Optional[Iterable[str]]) -> str:
    if values is None or isinstance(values, float):
        return ""
    return ", ".join(str(v) for v in values)


def previous_month(today: date) -> tuple[int, int]:
    """(year, month) of the month before `today`."""
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1
