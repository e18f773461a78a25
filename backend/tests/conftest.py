import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "lightbnb_test.db"
    # Point backend to this temp DB
    os.environ["LIGHTBNB_DB_PATH"] = str(path)
    from backend.scripts.init_db import init_db
    init_db(str(path))
    yield str(path)
    from backend.db import reset_pool
    reset_pool()


@pytest.fixture()
def client(tmp_db_path):
    from backend.logs import ensure_log_schema
    ensure_log_schema()
    # Import app after DB ready
    from backend.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("LIGHTBNB_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    from backend.db import reset_pool
    reset_pool()
    # children first, foreign keys are on
    tables = ["property_reviews", "reservations", "properties", "users", "operation_log"]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield
    reset_pool()
