# backend/plaza/api/__init__.py
from __future__ import annotations

"""
API router aggregation.

This module exposes a single `api_router` that the FastAPI app
can include with a prefix such as `/api`.
"""

from fastapi import APIRouter

from . import art, navigation, teams, tournaments, users

api_router = APIRouter()
api_router.include_router(navigation.router)
api_router.include_router(art.router)
api_router.include_router(teams.router)
api_router.include_router(users.router)
api_router.include_router(tournaments.router)
