import json, time, uuid, datetime as dt
from typing import Optional
from .db import get_conn

# one row per API mutation; payload/after are JSON text
DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  user TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  request_id TEXT,
  payload_json TEXT,
  after_json TEXT,
  result TEXT NOT NULL,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
CREATE INDEX IF NOT EXISTS idx_log_entity ON operation_log(entity_type, entity_id);
"""

_COLUMNS = (
    "ts", "user", "action", "entity_type", "entity_id", "request_id",
    "payload_json", "after_json", "result", "err_msg", "latency_ms",
)

def ensure_log_schema():
    with get_conn() as conn:
        conn.executescript(DDL)

def _dumps(obj) -> Optional[str]:
    return json.dumps(obj, ensure_ascii=False, default=str) if obj is not None else None

class LogContext:
    """Audit one API mutation.

    Used as ``with LogContext("CREATE_USER", payload=...) as log:``; leaving the
    block writes an OK row, or an ERROR row with the exception text before the
    exception propagates.
    """

    def __init__(self, action: str, payload=None, user: str = "anonymous"):
        self.action = action
        self.user = user
        self.payload = payload
        self.request_id = str(uuid.uuid4())
        self.entity_type = None
        self.entity_id = None
        self.after = None
        self._start = None

    def created(self, etype: str, record: dict):
        self.entity_type = etype
        self.entity_id = str(record.get("id")) if record.get("id") is not None else None
        self.after = record

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc is None:
            self.write("OK")
        else:
            self.write("ERROR", str(exc))
        return False

    def write(self, result: str, err: Optional[str] = None):
        started = self._start if self._start is not None else time.perf_counter()
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "payload_json": _dumps(self.payload),
            "after_json": _dumps(self.after),
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - started) * 1000),
        }
        sql = "INSERT INTO operation_log({}) VALUES({})".format(
            ",".join(_COLUMNS), ",".join(f":{c}" for c in _COLUMNS)
        )
        with get_conn() as conn:
            conn.execute(sql, rec)

# filter name -> (fragment, value transform)
_LOG_FILTERS = (
    ("q", "(payload_json LIKE :q OR after_json LIKE :q OR err_msg LIKE :q)", lambda v: f"%{v}%"),
    ("action", "action = :action", str.upper),
    ("entity_type", "entity_type = :entity_type", str),
    ("result", "result = :result", str.upper),
    ("ts_from", "ts >= :ts_from", str),
    ("ts_to", "ts <= :ts_to", str),
)

def search_logs(page: int = 1, size: int = 20, **filters):
    """(total, rows) of operation_log, newest first; falsy filters are skipped."""
    where, params = [], {}
    for name, fragment, transform in _LOG_FILTERS:
        if filters.get(name):
            where.append(fragment)
            params[name] = transform(filters[name])
    wh = " WHERE " + " AND ".join(where) if where else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (max(page, 1) - 1) * size},
        ).fetchall()
    return total, [dict(r) for r in rows]
