# backend/plaza/api/teams.py
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from plaza import models, schemas
from plaza.api.deps import get_current_user, get_optional_user
from plaza.db.session import get_db
from plaza.errors import InvariantError, TeamLimitError
from plaza.services import teams as team_repository
from plaza.utils import slugify

router = APIRouter(prefix="/teams", tags=["teams"])


def _get_team_or_404(db: Session, custom_url: str) -> models.AllTeam:
    team = (
        db.query(models.AllTeam)
        .filter(
            models.AllTeam.custom_url == custom_url.lower(),
            models.AllTeam.deleted_at.is_(None),
        )
        .first()
    )
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


def _require_role(
    db: Session,
    team: models.AllTeam,
    user: models.User,
    *,
    allow_manager: bool = False,
) -> models.AllTeamMember:
    membership = team_repository.find_membership(db, user_id=user.id, team_id=team.id)
    if not membership:
        raise HTTPException(status_code=403, detail="User is not a member of this team")
    if membership.is_owner or (allow_manager and membership.is_manager):
        return membership
    raise HTTPException(status_code=403, detail="Insufficient team permissions")


def _custom_url_for(name: str) -> str:
    custom_url = slugify(name)
    if not custom_url:
        raise HTTPException(
            status_code=400,
            detail="Team name must contain at least one letter or number",
        )
    return custom_url


@router.get("", response_model=list[schemas.TeamListItem])
def list_teams(db: Session = Depends(get_db)) -> list[schemas.TeamListItem]:
    return team_repository.find_all_undisbanded(db)


@router.post("", response_model=schemas.TeamDetail)
def create_team(
    payload: schemas.TeamCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.TeamDetail:
    custom_url = _custom_url_for(payload.name)
    if team_repository.custom_url_taken(db, custom_url):
        raise HTTPException(
            status_code=400,
            detail=f"Team with url '{custom_url}' already exists.",
        )

    current_teams = team_repository.teams_by_member_user_id(db, user.id)
    if len(current_teams) >= team_repository.max_teams_allowed(user):
        raise HTTPException(status_code=400, detail="Trying to exceed allowed team count")

    team_repository.create(
        db,
        name=payload.name,
        custom_url=custom_url,
        owner_user_id=user.id,
        is_main_team=len(current_teams) == 0,
    )
    return team_repository.find_by_custom_url(db, custom_url, include_invite_code=True)


@router.get("/{custom_url}", response_model=schemas.TeamDetail)
def get_team(
    custom_url: str,
    db: Session = Depends(get_db),
    user: models.User | None = Depends(get_optional_user),
) -> schemas.TeamDetail:
    team = team_repository.find_by_custom_url(db, custom_url, include_invite_code=True)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")

    is_owner = user is not None and any(
        m["id"] == user.id and m["is_owner"] for m in team["members"]
    )
    if not is_owner:
        team.pop("invite_code", None)
    return team


@router.patch("/{custom_url}", response_model=schemas.TeamRead)
def update_team(
    custom_url: str,
    payload: schemas.TeamUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.TeamRead:
    team = _get_team_or_404(db, custom_url)
    _require_role(db, team, user, allow_manager=True)

    new_custom_url = _custom_url_for(payload.name)
    if new_custom_url != team.custom_url and team_repository.custom_url_taken(db, new_custom_url):
        raise HTTPException(
            status_code=400,
            detail=f"Team with url '{new_custom_url}' already exists.",
        )

    return team_repository.update(
        db,
        team_id=team.id,
        name=payload.name,
        custom_url=new_custom_url,
        bio=payload.bio,
        bsky=payload.bsky,
        css=payload.css,
    )


@router.delete("/{custom_url}")
def delete_team(
    custom_url: str,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> dict:
    team = _get_team_or_404(db, custom_url)
    _require_role(db, team, user)
    team_repository.delete(db, team.id)
    return {"status": "deleted"}


@router.post("/{custom_url}/join")
def join_team(
    custom_url: str,
    payload: schemas.TeamJoin,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> dict:
    team = _get_team_or_404(db, custom_url)
    if payload.invite_code != team.invite_code:
        raise HTTPException(status_code=400, detail="Invalid invite code")
    if team_repository.find_membership(db, user_id=user.id, team_id=team.id):
        raise HTTPException(status_code=400, detail="Already a member of this team")

    try:
        team_repository.add_new_team_member(
            db,
            user_id=user.id,
            team_id=team.id,
            max_teams_allowed=team_repository.max_teams_allowed(user),
        )
    except TeamLimitError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"status": "joined"}


@router.post("/{custom_url}/leave")
def leave_team(
    custom_url: str,
    payload: schemas.TeamLeave,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> dict:
    team = _get_team_or_404(db, custom_url)
    if payload.new_owner_user_id is not None and not team_repository.find_membership(
        db, user_id=payload.new_owner_user_id, team_id=team.id
    ):
        raise HTTPException(status_code=400, detail="New owner must be a member of this team")

    try:
        team_repository.handle_member_leaving(
            db,
            user_id=user.id,
            team_id=team.id,
            new_owner_user_id=payload.new_owner_user_id,
        )
    except InvariantError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"status": "left"}


@router.post("/{custom_url}/main")
def make_main_team(
    custom_url: str,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> dict:
    team = _get_team_or_404(db, custom_url)
    try:
        team_repository.switch_main_team(db, user_id=user.id, team_id=team.id)
    except InvariantError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"status": "ok"}


@router.post("/{custom_url}/reset-invite-code", response_model=schemas.InviteCodeRead)
def reset_invite_code(
    custom_url: str,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> schemas.InviteCodeRead:
    team = _get_team_or_404(db, custom_url)
    _require_role(db, team, user)
    return schemas.InviteCodeRead(invite_code=team_repository.reset_invite_code(db, team.id))


@router.delete("/{custom_url}/images/{image_type}")
def remove_team_image(
    custom_url: str,
    image_type: Literal["avatar", "banner"],
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
) -> dict:
    team = _get_team_or_404(db, custom_url)
    _require_role(db, team, user, allow_manager=True)
    team_repository.remove_team_image(db, team.id, image_type)
    return {"status": "deleted"}
