from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ..logs import LogContext
from ..services.user_svc import add_user, get_user_by_email, get_user_by_id

router = APIRouter()


class UserCreate(BaseModel):
    name: str
    email: str
    password: str


def _public(user: dict) -> dict:
    return {k: v for k, v in user.items() if k != "password"}


# must stay above /api/users/{user_id}
@router.get("/api/users/by-email")
def api_user_by_email(email: str = Query(..., min_length=1)):
    user = get_user_by_email(email)
    if user is None:
        raise HTTPException(status_code=404, detail="user not found")
    return _public(user)


@router.get("/api/users/{user_id}")
def api_user_get(user_id: int):
    user = get_user_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="user not found")
    return _public(user)


@router.post("/api/users", status_code=201)
def api_user_create(body: UserCreate):
    with LogContext("CREATE_USER", payload={"name": body.name, "email": body.email}) as log:
        user = _public(add_user(body.dict())[0])
        log.created("user", user)
    return user
