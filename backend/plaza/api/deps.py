# backend/plaza/api/deps.py
from __future__ import annotations

"""
Shared route dependencies.

The acting user is identified by the ``X-User-Id`` header set by the
session layer in front of this API.
"""

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from plaza import models
from plaza.db.session import get_db


def get_current_user(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> models.User:
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    user = db.get(models.User, x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


def get_optional_user(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> models.User | None:
    if x_user_id is None:
        return None
    return db.get(models.User, x_user_id)
