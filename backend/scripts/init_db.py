"""
Create the LightBnB tables (and the operation_log table) in the configured DB.

Usage:
  python -m backend.scripts.init_db [--db path/to/lightbnb.db] [--seed seeds/sample.sql]

Without --db the path is resolved like the app does (LIGHTBNB_DB_PATH, config.yaml, default).
"""
from __future__ import annotations

import argparse
import os

from backend.db import get_conn, get_db_path
from backend.logs import DDL as LOG_DDL

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")


def init_db(db_path: str | None = None, seed_path: str | None = None) -> str:
    path = db_path or get_db_path()
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        schema = f.read()
    with get_conn(path) as conn:
        conn.executescript(schema)
        conn.executescript(LOG_DDL)
        if seed_path:
            with open(seed_path, "r", encoding="utf-8") as f:
                conn.executescript(f.read())
    return path


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--db", default=None)
    ap.add_argument("--seed", default=None)
    args = ap.parse_args()

    path = init_db(args.db, args.seed)
    print({"message": "ok", "db_path": path})


if __name__ == "__main__":
    main()
