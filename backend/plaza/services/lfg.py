# backend/plaza/services/lfg.py
from __future__ import annotations

from sqlalchemy.orm import Session

from plaza import models


def delete_posts_by_team_id(db: Session, team_id: int) -> int:
    """Delete every LFG post made on behalf of a team. Caller commits."""
    return (
        db.query(models.LFGPost)
        .filter(models.LFGPost.team_id == team_id)
        .delete(synchronize_session=False)
    )
