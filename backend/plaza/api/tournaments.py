# backend/plaza/api/tournaments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from plaza import models, schemas
from plaza.api.deps import get_current_user
from plaza.config import get_settings
from plaza.db.session import get_db
from plaza.services.statsig_client import log_backend_event
from plaza.services.tournament import repository as tournament_repository
from plaza.services.tournament.roster import load_roster
from plaza.services.tournament.team_actions import BRACKET_CHECK_IN_ACTION, CHECK_IN_ACTION
from plaza.services.tournament.types import TournamentStream

router = APIRouter(prefix="/tournaments", tags=["tournaments"])


def _streams_read(db: Session, tournament_id: int) -> schemas.TournamentStreamsRead:
    return schemas.TournamentStreamsRead(
        streams=[
            schemas.TournamentStreamItem.model_validate(stream)
            for stream in tournament_repository.list_streams(db, tournament_id)
        ],
        streaming_participants=tournament_repository.streaming_participants(db, tournament_id),
    )


@router.post("/{tournament_id}/actions", response_model=schemas.TournamentActionResult)
def tournament_action(
    tournament_id: int,
    payload: schemas.TournamentActionRequest,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.TournamentActionResult:
    """
    Participant actions posted by the bracket UI, discriminated by ``_action``.
    """
    roster = load_roster(db, tournament_id)
    team = roster.team_member_of_by_user(user.id)
    if not team:
        raise HTTPException(status_code=400, detail="User is not a member of any team in this tournament")

    if payload.action == CHECK_IN_ACTION:
        if len(team.members) < get_settings().min_members_per_team:
            raise HTTPException(
                status_code=400,
                detail="Can't check-in, registration needs to be finished by the captain (full roster)",
            )
        bracket_idx = None
    elif payload.action == BRACKET_CHECK_IN_ACTION:
        bracket_idx = payload.bracket_idx
    else:
        raise HTTPException(status_code=400, detail=f"Unknown action '{payload.action}'")

    created = tournament_repository.check_in(
        db,
        tournament_team_id=team.id,
        bracket_idx=bracket_idx,
    )
    if created:
        log_backend_event(
            "tournament_check_in",
            user_id=str(user.id),
            metadata={
                "tournament_id": tournament_id,
                "tournament_team_id": team.id,
                "bracket_idx": bracket_idx,
            },
        )

    return schemas.TournamentActionResult(
        action=payload.action,
        tournament_team_id=team.id,
        bracket_idx=bracket_idx,
        created=created,
    )


@router.get("/{tournament_id}/streams", response_model=schemas.TournamentStreamsRead)
def get_streams(
    tournament_id: int,
    db: Session = Depends(get_db),
) -> schemas.TournamentStreamsRead:
    return _streams_read(db, tournament_id)


@router.put("/{tournament_id}/streams", response_model=schemas.TournamentStreamsRead)
def replace_streams(
    tournament_id: int,
    payload: schemas.TournamentStreamsUpdate,
    db: Session = Depends(get_db),
) -> schemas.TournamentStreamsRead:
    tournament_repository.replace_streams(
        db,
        tournament_id,
        (TournamentStream(**stream.model_dump()) for stream in payload.streams),
    )
    return _streams_read(db, tournament_id)
