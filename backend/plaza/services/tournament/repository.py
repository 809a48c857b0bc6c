# backend/plaza/services/tournament/repository.py
from __future__ import annotations

"""
Tournament check-ins and live streams.

Check-ins are idempotent: checking in twice for the same scope (tournament
or a given bracket) keeps the first record.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from plaza import models
from plaza.db.session import transaction
from plaza.services.tournament.roster import load_roster
from plaza.services.tournament.types import TournamentStream

logger = logging.getLogger(__name__)


def find_check_in(
    db: Session,
    *,
    tournament_team_id: int,
    bracket_idx: Optional[int] = None,
) -> models.TournamentTeamCheckIn | None:
    query = db.query(models.TournamentTeamCheckIn).filter(
        models.TournamentTeamCheckIn.tournament_team_id == tournament_team_id
    )
    if bracket_idx is None:
        query = query.filter(models.TournamentTeamCheckIn.bracket_idx.is_(None))
    else:
        query = query.filter(models.TournamentTeamCheckIn.bracket_idx == bracket_idx)
    return query.first()


def check_in(
    db: Session,
    *,
    tournament_team_id: int,
    bracket_idx: Optional[int] = None,
) -> bool:
    """Record a check-in. Returns False when the team was already checked in."""
    with transaction(db):
        existing = find_check_in(db, tournament_team_id=tournament_team_id, bracket_idx=bracket_idx)
        if existing:
            return False

        db.add(
            models.TournamentTeamCheckIn(
                tournament_team_id=tournament_team_id,
                bracket_idx=bracket_idx,
            )
        )

    logger.info("Tournament team %s checked in (bracket_idx=%s)", tournament_team_id, bracket_idx)
    return True


def list_streams(db: Session, tournament_id: int) -> list[TournamentStream]:
    rows = (
        db.query(models.LiveStream)
        .filter(models.LiveStream.tournament_id == tournament_id)
        .order_by(models.LiveStream.viewer_count.desc(), models.LiveStream.twitch_user_name.asc())
        .all()
    )
    return [
        TournamentStream(
            twitch_user_name=row.twitch_user_name,
            viewer_count=row.viewer_count,
            thumbnail_url=row.thumbnail_url,
            user_id=row.user_id,
            started_at=row.started_at,
        )
        for row in rows
    ]


def replace_streams(
    db: Session,
    tournament_id: int,
    streams: Iterable[TournamentStream],
) -> int:
    """Swap the stored live streams of a tournament for a fresh snapshot."""
    now = datetime.utcnow()
    count = 0
    with transaction(db):
        (
            db.query(models.LiveStream)
            .filter(models.LiveStream.tournament_id == tournament_id)
            .delete(synchronize_session=False)
        )
        for stream in streams:
            db.add(
                models.LiveStream(
                    tournament_id=tournament_id,
                    twitch_user_name=stream.twitch_user_name,
                    user_id=stream.user_id,
                    viewer_count=stream.viewer_count,
                    thumbnail_url=stream.thumbnail_url,
                    started_at=stream.started_at,
                    updated_at=now,
                )
            )
            count += 1
    return count


def streaming_participants(db: Session, tournament_id: int) -> list[int]:
    """User ids of registered players of the tournament that are live."""
    participants = load_roster(db, tournament_id).participant_user_ids()
    return sorted(
        {
            stream.user_id
            for stream in list_streams(db, tournament_id)
            if stream.user_id is not None and stream.user_id in participants
        }
    )
