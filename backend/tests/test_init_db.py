import os

from backend.db import get_conn
from backend.scripts.init_db import init_db

_SEED = os.path.join(os.path.dirname(__file__), "..", "..", "seeds", "sample.sql")


def test_init_db_creates_schema_and_loads_seed(tmp_path):
    path = init_db(str(tmp_path / "seeded.db"), _SEED)
    with get_conn(path) as conn:
        tables = {r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert {"users", "properties", "reservations", "property_reviews", "operation_log"} <= tables
        assert conn.execute("SELECT COUNT(1) AS c FROM users").fetchone()["c"] == 3
        assert conn.execute("SELECT COUNT(1) AS c FROM properties WHERE active = 1").fetchone()["c"] == 3


def test_init_db_is_idempotent(tmp_path):
    path = str(tmp_path / "twice.db")
    init_db(path)
    init_db(path)
    with get_conn(path) as conn:
        assert conn.execute("SELECT COUNT(1) AS c FROM users").fetchone()["c"] == 0
