# backend/plaza/api/navigation.py
from __future__ import annotations

from fastapi import APIRouter

from plaza import schemas
from plaza.config import get_settings
from plaza.services.navigation import nav_items_as_dicts

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("", response_model=list[schemas.NavItemRead])
def list_nav_items() -> list[schemas.NavItemRead]:
    return nav_items_as_dicts(get_settings())
