# backend/plaza/api/users.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from plaza import models, schemas
from plaza.db.session import get_db
from plaza.services import teams as team_repository

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/teams", response_model=list[schemas.TeamMemberOf])
def list_user_teams(
    user_id: int,
    db: Session = Depends(get_db),
) -> list[schemas.TeamMemberOf]:
    if not db.get(models.User, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return team_repository.find_all_member_of_by_user_id(db, user_id)
