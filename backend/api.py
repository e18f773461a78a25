"""
FastAPI app entry point aggregating per-domain routers under backend/routes.
Keep as `uvicorn backend.api:app`.
"""
from __future__ import annotations


from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import reset_pool
from .errors import DatabaseConnectionError, QueryError
from .logs import ensure_log_schema


app = FastAPI(title="lightbnb-api", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    ensure_log_schema()


@app.on_event("shutdown")
def on_shutdown():
    reset_pool()


@app.exception_handler(QueryError)
async def handle_query_error(request: Request, exc: QueryError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(DatabaseConnectionError)
async def handle_connection_error(request: Request, exc: DatabaseConnectionError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Include routers (split by business domain)
from .routes import base as base_routes
from .routes import users as users_routes
from .routes import properties as properties_routes
from .routes import reservations as reservations_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(users_routes.router)
app.include_router(properties_routes.router)
app.include_router(reservations_routes.router)
app.include_router(logs_routes.router)
