from __future__ import annotations

# backend/services/utils.py
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from ..db import get_pool
from ..errors import DatabaseConnectionError, QueryError

logger = logging.getLogger(__name__)


@contextmanager
def pooled_conn(op: str) -> Iterator[sqlite3.Connection]:
    """Borrow a pooled connection for one operation.

    Driver errors and bad or out-of-range parameter values surface as QueryError; pool/connect
    failures as DatabaseConnectionError. Both are logged once with the op name.
    """
    try:
        with get_pool().connection() as conn:
            yield conn
    except DatabaseConnectionError as e:
        logger.error(f"{op}: connection error: {e}")
        raise
    except (sqlite3.Error, ValueError, TypeError, OverflowError) as e:
        logger.error(f"{op}: query error: {e}")
        raise QueryError(f"{op} failed: {e}") from e
