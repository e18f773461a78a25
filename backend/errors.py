"""Errors raised by the data-access layer.

"Not found" is never an error: lookups return None or an empty list.
"""
from __future__ import annotations


class RepositoryError(Exception):
    """Base class for failures talking to the database."""


class DatabaseConnectionError(RepositoryError):
    """The database could not be opened or no pooled connection was available."""


class QueryError(RepositoryError):
    """A statement failed: bad SQL, constraint violation, type mismatch, unknown column."""

    def __init__(self, message: str, sql: str | None = None):
        super().__init__(message)
        self.sql = sql
