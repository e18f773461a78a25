from __future__ import annotations

# backend/services/property_svc.py
from typing import Any, Mapping

from ..repository import property_repo
from .utils import pooled_conn


def to_property_record(row) -> dict:
    rec = dict(row)
    if rec.get("active") is not None:
        rec["active"] = bool(rec["active"])
    return rec


def list_properties(options: Mapping[str, Any] | None = None, limit: int = 10) -> list[dict]:
    """Properties with their average review rating, cheapest first.

    Recognized options (all optional, combined with AND, ignored when falsy):
    - city: case-sensitive substring of the city
    - owner_id: exact owner
    - minimum_price_per_night / maximum_price_per_night: bounds in major units (x100 against cents)
    - minimum_rating: lower bound on the average rating
    Properties without reviews are not listed.
    """
    with pooled_conn("list_properties") as conn:
        rows = property_repo.list_properties(conn, options, limit)
    return [to_property_record(r) for r in rows]


def add_property(prop: Mapping[str, Any]) -> list[dict]:
    """Insert the truthy fields of `prop` with active = true; returns the inserted row(s)."""
    with pooled_conn("add_property") as conn:
        new_id = property_repo.insert_property(conn, prop)
        row = property_repo.get_by_id(conn, new_id)
    return [to_property_record(row)] if row else []
