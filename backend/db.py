from __future__ import annotations

# backend/db.py
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

import yaml
from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import QueuePool

from .errors import DatabaseConnectionError

# DB path resolution order:
# 1) env LIGHTBNB_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: lightbnb.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "lightbnb.db")

DEFAULT_POOL_SIZE = 5
DEFAULT_POOL_TIMEOUT = 5.0


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    out = {}
    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    for k in ("pool_size", "pool_timeout"):
        if cfg.get(k) is not None:
            out[k] = cfg[k]
    return out


def get_db_path(_: str | None = None) -> str:
    env_path = os.environ.get("LIGHTBNB_DB_PATH")
    cfg = _read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg_test:
        path = cfg_test
    elif cfg_db:
        path = cfg_db
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


def get_pool_settings() -> tuple[int, float]:
    """(pool_size, pool_timeout); env overrides config.yaml, bad values fall back to defaults."""
    cfg = _read_config_yaml()
    size = os.environ.get("LIGHTBNB_POOL_SIZE", cfg.get("pool_size", DEFAULT_POOL_SIZE))
    timeout = os.environ.get("LIGHTBNB_POOL_TIMEOUT", cfg.get("pool_timeout", DEFAULT_POOL_TIMEOUT))
    try:
        size = max(1, int(size))
    except (TypeError, ValueError):
        size = DEFAULT_POOL_SIZE
    try:
        timeout = float(timeout)
    except (TypeError, ValueError):
        timeout = DEFAULT_POOL_TIMEOUT
    return size, timeout


def _connect(path: str) -> sqlite3.Connection:
    try:
        conn = sqlite3.connect(
            path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
            check_same_thread=False,
            isolation_level=None,
        )
    except sqlite3.Error as e:
        raise DatabaseConnectionError(f"cannot open database {path}: {e}") from e
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        # fail here, not on first query, when the file is not a usable database
        conn.execute("SELECT 1 FROM sqlite_master LIMIT 1")
    except sqlite3.Error as e:
        conn.close()
        raise DatabaseConnectionError(f"cannot open database {path}: {e}") from e
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a single SQLite connection outside the pool (scripts, schema setup, tests).
    foreign_keys is on and row_factory is Row.
    """
    conn = _connect(db_path or get_db_path())
    try:
        yield conn
    finally:
        conn.close()


class ConnectionPool:
    """Bounded set of reusable SQLite connections shared across threads (SQLAlchemy QueuePool).

    Connections are opened lazily up to ``size``; once all are checked out,
    ``connection()`` waits up to ``timeout`` seconds for one to come back.
    """

    def __init__(self, db_path: str, size: int = DEFAULT_POOL_SIZE, timeout: float = DEFAULT_POOL_TIMEOUT):
        self.db_path = db_path
        self.size = size
        self.timeout = timeout
        self._pool = QueuePool(
            lambda: _connect(db_path),
            pool_size=size,
            max_overflow=0,
            timeout=timeout,
        )
        self._closed = False

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        if self._closed:
            raise DatabaseConnectionError("connection pool is closed")
        try:
            conn = self._pool.connect()
        except sa_exc.TimeoutError as e:
            raise DatabaseConnectionError(
                f"no connection available after {self.timeout}s (pool size {self.size})"
            ) from e
        try:
            yield conn
        finally:
            # back to the pool; pending work is rolled back on return
            conn.close()

    def close(self) -> None:
        self._closed = True
        self._pool.dispose()


_pool: ConnectionPool | None = None
_pool_lock = threading.Lock()


def get_pool() -> ConnectionPool:
    """Process-wide pool for the resolved DB path, created on first use."""
    global _pool
    with _pool_lock:
        if _pool is None:
            size, timeout = get_pool_settings()
            _pool = ConnectionPool(get_db_path(), size=size, timeout=timeout)
        return _pool


def reset_pool() -> None:
    global _pool
    with _pool_lock:
        if _pool is not None:
            _pool.close()
        _pool = None
