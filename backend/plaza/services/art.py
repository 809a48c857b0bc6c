# backend/plaza/services/art.py
from __future__ import annotations

"""
Art gallery data access.

Writes run inside a single transaction:
- add_new_art: image + art + linked users + tags
- edit_art: showcase flag, description, linked users and tags replaced

An author's first art is always their showcase piece; marking another piece
as showcase clears the flag from the rest of their art.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from sqlalchemy.orm import Session, selectinload

from plaza import models
from plaza.db.session import transaction
from plaza.errors import invariant
from plaza.services.statsig_client import log_backend_event

logger = logging.getLogger(__name__)


@dataclass
class TagToAdd:
    """Existing tag (by id) or a new tag to create (by name)."""

    id: int | None = None
    name: str | None = None


def _link_users(db: Session, art_id: int, linked_users: Iterable[int]) -> None:
    for user_id in linked_users:
        db.add(models.ArtUserMetadata(art_id=art_id, user_id=user_id))


def _tag_id_by_name(db: Session, name: str, author_id: int) -> int:
    # Tag names are unique; a name someone already created is reused
    existing = db.query(models.ArtTag.id).filter(models.ArtTag.name == name).scalar()
    if existing:
        return existing

    new_tag = models.ArtTag(name=name, author_id=author_id)
    db.add(new_tag)
    db.flush()
    return new_tag.id


def _tag_art(db: Session, art_id: int, author_id: int, tags: Iterable[TagToAdd]) -> None:
    tagged: set[int] = set()
    for tag in tags:
        tag_id = tag.id
        if not tag_id:
            invariant(tag.name, "tag name must be provided if no id")
            tag_id = _tag_id_by_name(db, tag.name, author_id)

        if tag_id in tagged:
            continue
        tagged.add(tag_id)
        db.add(models.TaggedArt(art_id=art_id, tag_id=tag_id))


def add_new_art(
    db: Session,
    *,
    author_id: int,
    description: str | None,
    url: str,
    validated_at: datetime | None,
    linked_users: list[int],
    tags: list[TagToAdd],
) -> int:
    with transaction(db):
        img = models.UnvalidatedUserSubmittedImage(
            submitter_user_id=author_id,
            url=url,
            validated_at=validated_at,
        )
        db.add(img)
        db.flush()

        has_art = (
            db.query(models.Art.id)
            .filter(models.Art.author_id == author_id)
            .first()
            is not None
        )
        art = models.Art(
            author_id=author_id,
            description=description,
            img_id=img.id,
            is_showcase=not has_art,
        )
        db.add(art)
        db.flush()

        _link_users(db, art.id, linked_users)
        _tag_art(db, art.id, author_id, tags)
        art_id = art.id

    logger.info("Art %s added by user %s", art_id, author_id)
    log_backend_event(
        "art_added",
        user_id=str(author_id),
        metadata={"art_id": art_id, "tags": len(tags)},
    )
    return art_id


def edit_art(
    db: Session,
    *,
    art_id: int,
    author_id: int,
    description: str | None,
    is_showcase: bool,
    linked_users: list[int],
    tags: list[TagToAdd],
) -> int:
    with transaction(db):
        if is_showcase:
            (
                db.query(models.Art)
                .filter(models.Art.author_id == author_id)
                .update({models.Art.is_showcase: False}, synchronize_session="fetch")
            )

        art = db.get(models.Art, art_id)
        invariant(art, "Art not found")
        art.description = description
        art.is_showcase = is_showcase

        db.query(models.ArtUserMetadata).filter(
            models.ArtUserMetadata.art_id == art_id
        ).delete(synchronize_session=False)
        _link_users(db, art_id, linked_users)

        db.query(models.TaggedArt).filter(
            models.TaggedArt.art_id == art_id
        ).delete(synchronize_session=False)
        _tag_art(db, art_id, author_id, tags)

    return art_id


def find_art_by_id(db: Session, art_id: int) -> models.Art | None:
    return (
        db.query(models.Art)
        .options(
            selectinload(models.Art.image),
            selectinload(models.Art.tags),
            selectinload(models.Art.linked_users),
        )
        .filter(models.Art.id == art_id)
        .first()
    )


def find_arts_by_author(db: Session, author_id: int) -> list[models.Art]:
    """Author's art, showcase piece first, then newest first."""
    return (
        db.query(models.Art)
        .options(
            selectinload(models.Art.image),
            selectinload(models.Art.tags),
            selectinload(models.Art.linked_users),
        )
        .filter(models.Art.author_id == author_id)
        .order_by(models.Art.is_showcase.desc(), models.Art.created_at.desc(), models.Art.id.desc())
        .all()
    )
