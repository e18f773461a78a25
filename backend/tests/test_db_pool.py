from concurrent.futures import ThreadPoolExecutor

import pytest

from backend import db
from backend.db import ConnectionPool, get_pool, get_pool_settings, reset_pool
from backend.errors import DatabaseConnectionError
from backend.services import user_svc


def test_get_db_path_prefers_env(tmp_db_path):
    assert db.get_db_path() == tmp_db_path


def test_pool_settings_env_override(monkeypatch):
    monkeypatch.setenv("LIGHTBNB_POOL_SIZE", "3")
    monkeypatch.setenv("LIGHTBNB_POOL_TIMEOUT", "0.5")
    assert get_pool_settings() == (3, 0.5)


def test_pool_settings_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("LIGHTBNB_POOL_SIZE", "many")
    monkeypatch.setenv("LIGHTBNB_POOL_TIMEOUT", "soon")
    assert get_pool_settings() == (db.DEFAULT_POOL_SIZE, db.DEFAULT_POOL_TIMEOUT)


def test_shared_pool_is_reused(tmp_db_path):
    p1 = get_pool()
    assert get_pool() is p1
    assert p1.db_path == tmp_db_path
    reset_pool()
    assert get_pool() is not p1


def test_connections_are_reused(tmp_db_path):
    pool = ConnectionPool(tmp_db_path, size=2, timeout=0.1)
    try:
        with pool.connection() as c1:
            raw = c1.dbapi_connection
        with pool.connection() as c2:
            assert c2.dbapi_connection is raw
    finally:
        pool.close()


def test_exhausted_pool_times_out(tmp_db_path):
    pool = ConnectionPool(tmp_db_path, size=1, timeout=0.05)
    try:
        with pool.connection():
            with pytest.raises(DatabaseConnectionError):
                with pool.connection():
                    pass
        # released again
        with pool.connection() as conn:
            assert conn.execute("SELECT 1 AS one").fetchone()["one"] == 1
    finally:
        pool.close()


def test_closed_pool_refuses(tmp_db_path):
    pool = ConnectionPool(tmp_db_path, size=1)
    pool.close()
    with pytest.raises(DatabaseConnectionError):
        with pool.connection():
            pass


def test_unreachable_database_is_connection_error(tmp_path):
    # a directory is not an openable database file
    pool = ConnectionPool(str(tmp_path), size=1, timeout=0.05)
    with pytest.raises(DatabaseConnectionError):
        with pool.connection():
            pass


def test_service_surfaces_connection_error(monkeypatch, tmp_path, caplog):
    monkeypatch.setenv("LIGHTBNB_DB_PATH", str(tmp_path))
    reset_pool()
    with caplog.at_level("ERROR"):
        with pytest.raises(DatabaseConnectionError):
            user_svc.get_user_by_email("eva@example.com")
    assert "get_user_by_email" in caplog.text


def test_concurrent_calls_share_bounded_pool(monkeypatch):
    monkeypatch.setenv("LIGHTBNB_POOL_SIZE", "3")
    reset_pool()
    ids = [
        user_svc.add_user({"name": f"User {i}", "email": f"u{i}@example.com", "password": "pw"})[0]["id"]
        for i in range(10)
    ]
    with ThreadPoolExecutor(max_workers=8) as ex:
        found = list(ex.map(user_svc.get_user_by_id, ids * 3))
    assert [u["id"] for u in found] == ids * 3
    assert get_pool().size == 3


def test_pooled_connections_enforce_foreign_keys(tmp_db_path):
    pool = ConnectionPool(tmp_db_path, size=1)
    try:
        with pool.connection() as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
            assert conn.execute("SELECT 1 AS one").fetchone()["one"] == 1
    finally:
        pool.close()


def test_pool_does_not_open_more_than_size(tmp_db_path):
    pool = ConnectionPool(tmp_db_path, size=2, timeout=0.05)
    try:
        with pool.connection() as a, pool.connection() as b:
            assert a.dbapi_connection is not b.dbapi_connection
            with pytest.raises(DatabaseConnectionError):
                with pool.connection():
                    pass
    finally:
        pool.close()
