from __future__ import annotations

from fastapi import APIRouter, Query

from ..services.reservation_svc import list_reservations_for_guest

router = APIRouter()


@router.get("/api/reservations")
def api_reservations_list(
    guest_id: int = Query(...),
    limit: int = Query(10, ge=1, le=100),
):
    items = list_reservations_for_guest(guest_id, limit)
    return {"total": len(items), "items": items}
