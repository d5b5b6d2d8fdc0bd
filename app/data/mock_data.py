"""
In-memory stand-in for the hosted backend.

`MockBackend` implements the same select/count/insert/update/delete contract
as `data.connection.RestClient` over pandas frames, so mock mode and the
read fallback run the exact same queries and aggregation helpers.
"""

from __future__ import annotations

import logging
import random
import re
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional, Sequence

import pandas as pd
from faker import Faker

from data.connection import BackendError, public_url
from data.queries import Filter, TableQuery

logger = logging.getLogger(__name__)

SCHOOLS = [
    "Greenwood International",
    "Sunrise Public School",
    "Little Scholars Academy",
    "Riverdale High",
    "St. Mary's Convent",
    "Delhi Public School",
    "Blue Bells Model School",
]
ACTIVITY_TYPES = ["express_yourself", "challenge_yourself", "brainy_bites"]
ACTIVITY_CATEGORIES = ["express", "challenge", "brainy"]
SUBMISSION_CATEGORIES = ["art", "music", "storytelling", "creative_writing"]
WINNER_CATEGORIES = ["art", "music", "storytelling"]
PRIZE_TYPES = ["first", "second", "peoples_choice", "participation"]
SKILLS = ["Creativity", "Communication", "Critical Thinking", "Confidence", "Collaboration"]
PRICES = {"express_yourself": 499, "challenge_yourself": 999, "brainy_bites": 299}

# (table, embed name) -> (local column, target table)
FOREIGN_KEYS: dict[tuple[str, str], tuple[str, str]] = {
    ("invoices", "enrollments"): ("enrollment_id", "enrollments"),
    ("submissions", "events"): ("event_id", "events"),
    ("submissions", "user_id"): ("user_id", "profiles"),
    ("comments", "user_id"): ("user_id", "profiles"),
    ("comments", "submission_id"): ("submission_id", "submissions"),
    ("winners", "events"): ("event_id", "events"),
    ("winners", "user_id"): ("user_id", "profiles"),
    ("winners", "submission_id"): ("submission_id", "submissions"),
}

_EMBED_RE = re.compile(r"^(?:(?P<alias>\w+):)?(?P<ref>\w+)\((?P<cols>.*)\)$")


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat()


def _split_select(select: str) -> list[str]:
    parts, depth, buf = [], 0, ""
    for ch in "".join(select.split()):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(buf)
            buf = ""
        else:
            buf += ch
    if buf:
        parts.append(buf)
    return parts


def _like_regex(pattern: str) -> str:
    return "".join(".*" if ch in "*%" else re.escape(ch) for ch in str(pattern))


def _as_utc(value: datetime) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")


def _mask(df: pd.DataFrame, f: Filter) -> pd.Series:
    col = df[f.column]
    value = f.value
    if isinstance(value, datetime):
        col = pd.to_datetime(col, utc=True, errors="coerce", format="ISO8601")
        value = _as_utc(value)

    if f.op == "eq":
        return col == value
    if f.op == "neq":
        return (col != value) & col.notna()
    if f.op == "gt":
        return col > value
    if f.op == "gte":
        return col >= value
    if f.op == "lt":
        return col < value
    if f.op == "lte":
        return col <= value
    if f.op in ("like", "ilike"):
        text = col.where(col.notna(), "").astype(str)
        return text.str.fullmatch(_like_regex(value), case=f.op == "like")
    if f.op == "in":
        return col.isin(list(value))
    # "is"
    if value is None:
        return col.isna()
    return col == value


class MockBackend:
    def __init__(self, tables: dict[str, pd.DataFrame], storage_base: str = "https://mock.storage/object/public"):
        self.tables = {name: df.reset_index(drop=True).copy() for name, df in tables.items()}
        self.storage_base = storage_base

    # --- helpers ---

    def _table(self, name: str) -> pd.DataFrame:
        if name not in self.tables:
            raise BackendError(f'relation "public.{name}" does not exist', status=404, code="42P01")
        return self.tables[name]

    def _filtered(self, table: str, filters: Sequence[Filter]) -> pd.DataFrame:
        df = self._table(table)
        mask = pd.Series(True, index=df.index)
        for f in filters:
            if f.column not in df.columns:
                raise BackendError(f"column {table}.{f.column} does not exist", status=400, code="42703")
            mask &= _mask(df, f).fillna(False).astype(bool)
        return df[mask]

    def _embed(self, table: str, df: pd.DataFrame, spec: str) -> tuple[str, list[Optional[dict]]]:
        m = _EMBED_RE.match(spec)
        if not m:
            raise BackendError(f"Could not parse select item: {spec}", status=400)
        ref = m.group("ref")
        name = m.group("alias") or ref
        if (table, ref) not in FOREIGN_KEYS:
            raise BackendError(f"Could not find a relationship between {table} and {ref}", status=400, code="PGRST200")
        local_col, target = FOREIGN_KEYS[(table, ref)]
        target_df = self._table(target)
        wanted = [c for c in m.group("cols").split(",") if c and c != "*"]
        lookup = {}
        for rec in target_df.to_dict("records"):
            lookup[rec["id"]] = {c: rec.get(c) for c in wanted} if wanted else rec
        values = [lookup.get(key) if pd.notna(key) else None for key in df[local_col]] if len(df) else []
        return name, values

    # --- client contract ---

    def select(self, query: TableQuery) -> pd.DataFrame:
        df = self._filtered(query.table, query.filters)
        if query.order:
            df = df.sort_values(
                by=[o.column for o in query.order],
                ascending=[o.ascending for o in query.order],
                na_position="last",
                kind="stable",
            )
        if query.limit is not None:
            df = df.head(query.limit)

        items = _split_select(query.select)
        plain = [i for i in items if "(" not in i]
        embeds = [i for i in items if "(" in i]
        if "*" in plain:
            out = df.copy()
        else:
            missing = [c for c in plain if c not in df.columns]
            if missing:
                raise BackendError(f"column {query.table}.{missing[0]} does not exist", status=400, code="42703")
            out = df[plain].copy()
        for spec in embeds:
            name, values = self._embed(query.table, df, spec)
            out[name] = values
        return out.reset_index(drop=True)

    def count(self, query: TableQuery) -> int:
        return int(len(self._filtered(query.table, query.filters)))

    def insert(self, table: str, rows: list[dict[str, Any]]) -> pd.DataFrame:
        df = self._table(table)
        next_id = int(pd.to_numeric(df["id"], errors="coerce").max() or 0) + 1 if len(df) else 1
        now = _iso(datetime.now(timezone.utc))
        new_rows = []
        for row in rows:
            row = dict(row)
            if row.get("id") is None:
                row["id"] = next_id
                next_id += 1
            row.setdefault("created_at", now)
            new_rows.append(row)
        added = pd.DataFrame.from_records(new_rows)
        self.tables[table] = pd.concat([df, added], ignore_index=True)
        logger.debug("mock insert %s rows=%d", table, len(new_rows))
        return added

    def update(self, table: str, values: dict[str, Any], filters: Sequence[Filter]) -> pd.DataFrame:
        if not filters:
            raise ValueError(f"Refusing to update every row of {table}")
        df = self._table(table)
        index = self._filtered(table, filters).index
        for key, value in values.items():
            if key not in df.columns:
                df[key] = None
            df[key] = df[key].astype(object)
            for idx in index:
                df.at[idx, key] = value
        logger.debug("mock update %s rows=%d", table, len(index))
        return df.loc[index].reset_index(drop=True)

    def delete(self, table: str, filters: Sequence[Filter]) -> int:
        if not filters:
            raise ValueError(f"Refusing to delete every row of {table}")
        df = self._table(table)
        index = self._filtered(table, filters).index
        self.tables[table] = df.drop(index=index).reset_index(drop=True)
        return int(len(index))

    def storage_public_url(self, bucket: str, path: str) -> str:
        return public_url(self.storage_base, bucket, path)


def build_tables(seed: int = 7, today: Optional[date] = None) -> dict[str, pd.DataFrame]:
    """Deterministic synthetic rows for every table the app reads."""
    rnd = random.Random(seed)
    fake = Faker("en_IN")
    fake.seed_instance(seed)
    today = today or date.today()
    now = datetime.combine(today, time(12, 0), tzinfo=timezone.utc)

    profiles = []
    for i in range(1, 61):
        created = now - timedelta(days=rnd.randint(0, 29), hours=rnd.randint(0, 11))
        profiles.append(
            {
                "id": i,
                "full_name": fake.name(),
                "email": fake.unique.email(),
                "role": rnd.choice(["parent", "parent", "student", "teacher"]),
                "phone_number": fake.phone_number() if rnd.random() < 0.7 else None,
                "school_name": rnd.choice(SCHOOLS) if rnd.random() < 0.8 else None,
                "xp": rnd.randint(0, 2500),
                "avatar_url": None,
                "created_at": _iso(created),
            }
        )

    events = []
    for i in range(1, 9):
        start = today + timedelta(days=rnd.randint(-40, 20))
        end = start + timedelta(days=rnd.randint(3, 21))
        status = "active" if start <= today <= end else ("upcoming" if start > today else "completed")
        category = ACTIVITY_CATEGORIES[i % len(ACTIVITY_CATEGORIES)]
        events.append(
            {
                "id": i,
                "title": f"{fake.word().title()} {rnd.choice(['Art Contest', 'Story Sprint', 'Music Jam', 'Quiz Quest'])}",
                "type": rnd.choice(["competition", "workshop"]),
                "date": start.isoformat(),
                "start_date": start.isoformat(),
                "end_date": _iso(datetime.combine(end, time(18, 0), tzinfo=timezone.utc)),
                "status": status,
                "month_year": start.strftime("%Y-%m"),
                "activity_category": category,
                "description": fake.sentence(nb_words=14),
                "skills": rnd.sample(SKILLS, k=2),
                "icon": rnd.choice(["🎨", "🎵", "📚", "🧩"]),
                "color": rnd.choice(["orange", "purple", "teal"]),
                "formats": rnd.choice(["Drawing, Painting", "Audio, Video", "Text"]),
            }
        )

    enrollments = []
    for i in range(1, 41):
        enrollments.append(
            {
                "id": i,
                "child_name": fake.first_name(),
                "parent_contact": fake.phone_number() if rnd.random() < 0.5 else fake.email(),
                "activity_type": rnd.choice(ACTIVITY_TYPES) if rnd.random() < 0.95 else None,
                "status": rnd.choice(["pending", "pending", "confirmed", "paid", "rejected"]),
                "created_at": _iso(now - timedelta(days=rnd.randint(0, 60))),
            }
        )

    invoices = []
    for enr in enrollments:
        if enr["status"] in ("paid", "confirmed"):
            invoices.append(
                {
                    "id": len(invoices) + 1,
                    "enrollment_id": enr["id"],
                    "amount": PRICES.get(enr["activity_type"] or "", 199),
                    "created_at": enr["created_at"],
                }
            )

    submissions = []
    for i in range(1, 51):
        status = rnd.choice(["pending", "approved", "approved", "rejected"])
        submissions.append(
            {
                "id": i,
                "user_id": rnd.randint(1, len(profiles)),
                "event_id": rnd.randint(1, len(events)) if rnd.random() < 0.85 else None,
                "category": rnd.choice(SUBMISSION_CATEGORIES) if rnd.random() < 0.9 else None,
                "description": fake.sentence(nb_words=10),
                "reflection": fake.sentence(nb_words=12),
                "file_url": f"https://picsum.photos/seed/creative{i}/600/400",
                "status": status,
                "certificate_approved": status == "approved" and rnd.random() < 0.5,
                "votes": rnd.randint(0, 40),
                "created_at": _iso(now - timedelta(days=rnd.randint(0, 45), hours=rnd.randint(0, 23))),
            }
        )

    comments = []
    for i in range(1, 16):
        comments.append(
            {
                "id": i,
                "user_id": rnd.randint(1, len(profiles)),
                "submission_id": rnd.randint(1, len(submissions)),
                "content": fake.sentence(nb_words=9),
                "status": rnd.choice(["pending", "pending", "approved", "rejected"]),
                "created_at": _iso(now - timedelta(hours=rnd.randint(1, 200))),
            }
        )

    resources = []
    for i in range(1, 7):
        kind = "video" if i % 2 else "article"
        resources.append(
            {
                "id": i,
                "title": fake.sentence(nb_words=4).rstrip("."),
                "type": kind,
                "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ" if kind == "video" else "",
                "content": "" if kind == "video" else f"<p>{fake.paragraph()}</p>",
                "description": fake.sentence(nb_words=12),
                "icon": rnd.choice(["💡", "🔬", "🌍", "🧠"]),
                "created_at": _iso(now - timedelta(days=i * 3)),
            }
        )

    winners = []
    approved = [s for s in submissions if s["status"] == "approved"]
    for back in range(0, 6):
        month_start = (today.replace(day=1) - timedelta(days=back * 28)).replace(day=1)
        for prize in PRIZE_TYPES:
            sub = rnd.choice(approved)
            winners.append(
                {
                    "id": len(winners) + 1,
                    "event_id": sub["event_id"],
                    "user_id": sub["user_id"],
                    "submission_id": sub["id"],
                    "month": month_start.month,
                    "year": month_start.year,
                    "category": rnd.choice(WINNER_CATEGORIES),
                    "prize_type": prize,
                    "status": "published",
                    "certificate_approved": rnd.random() < 0.6,
                    "created_at": _iso(datetime.combine(month_start, time(9, 0), tzinfo=timezone.utc)),
                }
            )

    user_skills = [
        {
            "id": i,
            "user_id": rnd.randint(1, len(profiles)),
            "skill": rnd.choice(SKILLS),
            "points": 10 * rnd.randint(1, 5),
            "updated_at": _iso(now),
        }
        for i in range(1, 11)
    ]

    return {
        "profiles": pd.DataFrame(profiles),
        "events": pd.DataFrame(events),
        "enrollments": pd.DataFrame(enrollments),
        "invoices": pd.DataFrame(invoices),
        "submissions": pd.DataFrame(submissions),
        "comments": pd.DataFrame(comments),
        "brainy_bites": pd.DataFrame(resources),
        "winners": pd.DataFrame(winners),
        "user_skills": pd.DataFrame(user_skills),
    }


@lru_cache(maxsize=1)
def get_mock_backend() -> MockBackend:
    """Process-wide mock backend; writes persist until the process restarts."""
    return MockBackend(build_tables())
