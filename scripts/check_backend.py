#!/usr/bin/env python3
"""
Connectivity check for the hosted backend.

Prints the row count of every table the app reads, then a sample of columns
from one table. Reads SUPABASE_URL / SUPABASE_ANON_KEY from the environment
(or a local .env), same as the app.

Usage:
  python scripts/check_backend.py
  python scripts/check_backend.py --sample-table winners --mock
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import requests

APP_DIR = Path(__file__).resolve().parent.parent / "app"
if str(APP_DIR) not in sys.path:
    sys.path.insert(0, str(APP_DIR))

from config import get_config  # noqa: E402
from data.connection import BackendError, get_rest_client  # noqa: E402
from data.mock_data import get_mock_backend  # noqa: E402
from data.queries import TABLES, TableQuery, q_count_table  # noqa: E402
from logging_setup import setup_logging  # noqa: E402

logger = logging.getLogger("check_backend")


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--sample-table", default="events", choices=TABLES)
    ap.add_argument("--mock", action="store_true", help="run against the in-memory mock backend")
    args = ap.parse_args()

    cfg = get_config()
    setup_logging(cfg.log_level)

    if not args.mock and not cfg.is_configured:
        print("ERROR: SUPABASE_URL and SUPABASE_ANON_KEY required (or pass --mock)")
        return 1

    client = get_mock_backend() if args.mock else get_rest_client(cfg)
    print(f"Backend: {'mock' if args.mock else cfg.rest_url}")

    failed = 0
    for table in TABLES:
        try:
            n = client.count(q_count_table(table))
        except (BackendError, requests.RequestException) as e:
            failed += 1
            logger.error("%s: %s", table, e)
            continue
        print(f"  {table:<14} {n:>6} rows")

    try:
        sample = client.select(TableQuery(args.sample_table, limit=3))
    except (BackendError, requests.RequestException) as e:
        logger.error("sample %s: %s", args.sample_table, e)
        return 1
    print(f"\n{args.sample_table} columns: {', '.join(sample.columns)}")
    print(sample.head(3).to_string(index=False))

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
