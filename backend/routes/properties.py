from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from ..logs import LogContext
from ..services.property_svc import add_property, list_properties

router = APIRouter()


class PropertyCreate(BaseModel):
    owner_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail_photo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
    cost_per_night: Optional[int] = None  # cents
    parking_spaces: Optional[int] = None
    number_of_bathrooms: Optional[int] = None
    number_of_bedrooms: Optional[int] = None
    country: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    post_code: Optional[str] = None

    class Config:
        # other columns of the properties table are passed through as-is
        extra = "allow"


@router.get("/api/properties")
def api_properties_list(
    city: Optional[str] = None,
    owner_id: Optional[int] = None,
    minimum_price_per_night: Optional[float] = Query(None, ge=0),
    maximum_price_per_night: Optional[float] = Query(None, ge=0),
    minimum_rating: Optional[float] = Query(None, ge=0, le=5),
    limit: int = Query(10, ge=1, le=100),
):
    options = {
        "city": city,
        "owner_id": owner_id,
        "minimum_price_per_night": minimum_price_per_night,
        "maximum_price_per_night": maximum_price_per_night,
        "minimum_rating": minimum_rating,
    }
    items = list_properties(options, limit)
    return {"total": len(items), "items": items}


@router.post("/api/properties", status_code=201)
def api_property_create(body: PropertyCreate):
    payload = body.dict(exclude_none=True)
    with LogContext("CREATE_PROPERTY", payload=payload) as log:
        prop = add_property(payload)[0]
        log.created("property", prop)
    return prop
