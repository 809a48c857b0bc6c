# backend/plaza/api/art.py
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from plaza import models, schemas
from plaza.api.deps import get_current_user
from plaza.db.session import get_db
from plaza.errors import InvariantError
from plaza.services import art as art_repository

router = APIRouter(prefix="/art", tags=["art"])


def _to_read(art: models.Art) -> schemas.ArtRead:
    return schemas.ArtRead(
        id=art.id,
        author_id=art.author_id,
        description=art.description,
        is_showcase=art.is_showcase,
        url=art.image.url,
        created_at=art.created_at,
        tags=[schemas.ArtTagRead.model_validate(tag) for tag in art.tags],
        linked_users=[schemas.LinkedUserRead.model_validate(u) for u in art.linked_users],
    )


def _tags(payload_tags: list[schemas.ArtTagInput]) -> list[art_repository.TagToAdd]:
    return [art_repository.TagToAdd(id=tag.id, name=tag.name) for tag in payload_tags]


@router.get("", response_model=list[schemas.ArtRead])
def list_art(
    author_id: int = Query(...),
    db: Session = Depends(get_db),
) -> list[schemas.ArtRead]:
    return [_to_read(art) for art in art_repository.find_arts_by_author(db, author_id)]


@router.post("", response_model=schemas.ArtCreated)
def add_art(
    payload: schemas.ArtCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.ArtCreated:
    try:
        art_id = art_repository.add_new_art(
            db,
            author_id=user.id,
            description=payload.description,
            url=payload.url,
            validated_at=datetime.utcnow() if user.is_artist else None,
            linked_users=payload.linked_users,
            tags=_tags(payload.tags),
        )
    except InvariantError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return schemas.ArtCreated(id=art_id)


@router.get("/{art_id}", response_model=schemas.ArtRead)
def get_art(
    art_id: int,
    db: Session = Depends(get_db),
) -> schemas.ArtRead:
    art = art_repository.find_art_by_id(db, art_id)
    if not art:
        raise HTTPException(status_code=404, detail="Art not found")
    return _to_read(art)


@router.patch("/{art_id}", response_model=schemas.ArtRead)
def edit_art(
    art_id: int,
    payload: schemas.ArtUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.ArtRead:
    art = db.get(models.Art, art_id)
    if not art:
        raise HTTPException(status_code=404, detail="Art not found")
    if art.author_id != user.id:
        raise HTTPException(status_code=403, detail="Only the author can edit this art")

    try:
        art_repository.edit_art(
            db,
            art_id=art_id,
            author_id=user.id,
            description=payload.description,
            is_showcase=payload.is_showcase,
            linked_users=payload.linked_users,
            tags=_tags(payload.tags),
        )
    except InvariantError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return _to_read(art_repository.find_art_by_id(db, art_id))
