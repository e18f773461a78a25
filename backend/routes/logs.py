from __future__ import annotations

from fastapi import APIRouter

from ..logs import search_logs

router = APIRouter()


@router.get("/api/logs/search")
def api_logs_search(
    page: int = 1,
    size: int = 20,
    action: str | None = None,
    entity_type: str | None = None,
    result: str | None = None,
    query: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
):
    total, items = search_logs(
        page, size,
        q=query, action=action, entity_type=entity_type, result=result, ts_from=ts_from, ts_to=ts_to,
    )
    return {"total": total, "items": items}
