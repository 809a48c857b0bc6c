# backend/plaza/main.py
from __future__ import annotations

"""
FastAPI application setup.

This module depends on:
- plaza.config.get_settings for configuration
- plaza.db.session.Base and engine for DB initialization
- plaza.api.api_router for route registration
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plaza import models  # noqa: F401  (registers tables on Base.metadata)
from plaza.api import api_router
from plaza.config import get_settings
from plaza.db.session import Base, engine
from plaza.services.statsig_client import shutdown_statsig

logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
)


# ---- CORS ----

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o).rstrip("/") for o in settings.allowed_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Routes ----

app.include_router(api_router, prefix="/api")


# ---- Lifecycle ----


@app.on_event("startup")
def on_startup() -> None:
    """
    Initialize database schema on startup.

    Deployments with an existing database manage the schema separately;
    `create_all` only creates missing tables.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)


@app.on_event("shutdown")
def on_shutdown() -> None:
    shutdown_statsig()


# ---- Healthcheck ----


@app.get("/health", tags=["health"])
def health() -> dict:
    return {"status": "ok"}
