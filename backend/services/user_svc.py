from __future__ import annotations

# backend/services/user_svc.py
from typing import Mapping

from ..repository import user_repo
from .utils import pooled_conn


def get_user_by_email(email: str) -> dict | None:
    """Single user with exactly this email, or None."""
    with pooled_conn("get_user_by_email") as conn:
        row = user_repo.get_by_email(conn, email)
    return dict(row) if row else None


def get_user_by_id(user_id: int) -> dict | None:
    with pooled_conn("get_user_by_id") as conn:
        row = user_repo.get_by_id(conn, user_id)
    return dict(row) if row else None


def add_user(user: Mapping[str, str]) -> list[dict]:
    """Insert name/email/password and return the inserted row(s).

    Duplicate emails are rejected by the UNIQUE constraint (QueryError).
    """
    with pooled_conn("add_user") as conn:
        new_id = user_repo.insert_user(conn, user.get("name"), user.get("email"), user.get("password"))
        row = user_repo.get_by_id(conn, new_id)
    return [dict(row)] if row else []
