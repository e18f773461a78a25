from __future__ import annotations

# backend/services/reservation_svc.py
import datetime as dt

from ..repository import reservation_repo
from .property_svc import to_property_record
from .utils import pooled_conn


def list_reservations_for_guest(guest_id: int, limit: int = 10, today: dt.date | None = None) -> list[dict]:
    """Past reservations (end_date before today) of a guest, oldest start first.

    Only reservations with at least one review are returned.
    """
    day = (today or dt.date.today()).isoformat()
    with pooled_conn("list_reservations_for_guest") as conn:
        rows = reservation_repo.list_past_for_guest(conn, guest_id, day, limit)
    return [to_property_record(r) for r in rows]
