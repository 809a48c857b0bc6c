# backend/plaza/services/teams.py
from __future__ import annotations

"""
Team repository.

Teams are soft deleted (``AllTeam.deleted_at``) and memberships are soft
left (``AllTeamMember.left_at``). "Active" below means an undeleted team and
a membership that has not been left.

Every user with at least one active membership has exactly one of them
flagged as main team; the writes in this module keep that true:
- create: the caller decides whether the new team becomes main
- add_new_team_member: the first team is main
- switch_main_team / handle_member_leaving / delete: the flag moves to
  another active team of the user when the main team goes away
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Literal

from sqlalchemy.orm import Session

from plaza import models
from plaza.config import get_settings
from plaza.db.session import transaction
from plaza.errors import TeamLimitError, invariant
from plaza.services import lfg
from plaza.services.statsig_client import log_backend_event
from plaza.utils import common_user_fields, short_nanoid

logger = logging.getLogger(__name__)

ImageType = Literal["avatar", "banner"]


# ---------- Query helpers ----------


def _active_memberships(db: Session):
    return (
        db.query(models.AllTeamMember)
        .join(models.AllTeam, models.AllTeam.id == models.AllTeamMember.team_id)
        .filter(
            models.AllTeamMember.left_at.is_(None),
            models.AllTeam.deleted_at.is_(None),
        )
    )


def _validated_image_urls(db: Session, image_ids: Iterable[int | None]) -> dict[int, str]:
    ids = {image_id for image_id in image_ids if image_id}
    if not ids:
        return {}
    rows = (
        db.query(
            models.UnvalidatedUserSubmittedImage.id,
            models.UnvalidatedUserSubmittedImage.url,
        )
        .filter(
            models.UnvalidatedUserSubmittedImage.id.in_(ids),
            models.UnvalidatedUserSubmittedImage.validated_at.isnot(None),
        )
        .all()
    )
    return {row.id: row.url for row in rows}


def _members_by_team(db: Session, team_ids: Iterable[int]) -> dict[int, list[models.AllTeamMember]]:
    ids = set(team_ids)
    grouped: dict[int, list[models.AllTeamMember]] = defaultdict(list)
    if not ids:
        return grouped
    memberships = (
        _active_memberships(db)
        .join(models.User, models.User.id == models.AllTeamMember.user_id)
        .filter(models.AllTeamMember.team_id.in_(ids))
        .order_by(models.AllTeamMember.created_at.asc(), models.AllTeamMember.id.asc())
        .all()
    )
    for membership in memberships:
        grouped[membership.team_id].append(membership)
    return grouped


def _find_active_team(db: Session, team_id: int) -> models.AllTeam | None:
    return (
        db.query(models.AllTeam)
        .filter(models.AllTeam.id == team_id, models.AllTeam.deleted_at.is_(None))
        .first()
    )


# ---------- Reads ----------


def find_all_undisbanded(db: Session) -> list[dict]:
    teams = (
        db.query(models.AllTeam)
        .filter(models.AllTeam.deleted_at.is_(None))
        .order_by(models.AllTeam.id.asc())
        .all()
    )
    avatar_urls = _validated_image_urls(db, (t.avatar_img_id for t in teams))
    members = _members_by_team(db, (t.id for t in teams))

    user_ids = {m.user_id for team_members in members.values() for m in team_members}
    plus_tiers = {}
    if user_ids:
        plus_tiers = {
            row.user_id: row.tier
            for row in db.query(models.PlusTier).filter(models.PlusTier.user_id.in_(user_ids))
        }

    return [
        {
            "custom_url": team.custom_url,
            "name": team.name,
            "avatar_src": avatar_urls.get(team.avatar_img_id),
            "members": [
                {
                    "id": m.user.id,
                    "username": m.user.username,
                    "plus_tier": plus_tiers.get(m.user_id),
                }
                for m in members.get(team.id, [])
            ],
        }
        for team in teams
    ]


def find_all_member_of_by_user_id(db: Session, user_id: int) -> list[dict]:
    memberships = (
        _active_memberships(db)
        .filter(models.AllTeamMember.user_id == user_id)
        .order_by(models.AllTeamMember.created_at.asc(), models.AllTeamMember.id.asc())
        .all()
    )
    logo_urls = _validated_image_urls(db, (m.team.avatar_img_id for m in memberships))
    return [
        {
            "id": m.team.id,
            "custom_url": m.team.custom_url,
            "name": m.team.name,
            "logo_url": logo_urls.get(m.team.avatar_img_id),
        }
        for m in memberships
    ]


def find_by_custom_url(
    db: Session,
    custom_url: str,
    *,
    include_invite_code: bool = False,
) -> dict | None:
    team = (
        db.query(models.AllTeam)
        .filter(
            models.AllTeam.custom_url == custom_url.lower(),
            models.AllTeam.deleted_at.is_(None),
        )
        .first()
    )
    if not team:
        return None

    image_urls = _validated_image_urls(db, (team.avatar_img_id, team.banner_img_id))
    members = []
    for m in _members_by_team(db, [team.id]).get(team.id, []):
        members.append(
            {
                **common_user_fields(m.user),
                "role": m.role,
                "is_owner": m.is_owner,
                "is_manager": m.is_manager,
                "is_main_team": m.is_main_team,
                "country": m.user.country,
                "patron_tier": m.user.patron_tier,
                "weapons": [
                    {"weapon_spl_id": w.weapon_spl_id, "is_favorite": w.is_favorite}
                    for w in sorted(m.user.weapons, key=lambda w: w.order)
                ],
            }
        )

    result = {
        "id": team.id,
        "name": team.name,
        "bsky": team.bsky,
        "bio": team.bio,
        "custom_url": team.custom_url,
        "css": team.css,
        "avatar_src": image_urls.get(team.avatar_img_id),
        "banner_src": image_urls.get(team.banner_img_id),
        "members": members,
    }
    if include_invite_code:
        result["invite_code"] = team.invite_code
    return result


def teams_by_member_user_id(db: Session, user_id: int) -> list[dict]:
    """
    Active memberships of a user with the full member list of each team.

    Runs on the caller's session so it sees uncommitted writes of an
    ongoing transaction.
    """
    memberships = (
        _active_memberships(db)
        .filter(models.AllTeamMember.user_id == user_id)
        .order_by(models.AllTeamMember.created_at.asc(), models.AllTeamMember.id.asc())
        .all()
    )
    members = _members_by_team(db, (m.team_id for m in memberships))
    return [
        {
            "id": m.team_id,
            "name": m.team.name,
            "is_owner": m.is_owner,
            "is_main_team": m.is_main_team,
            "members": [
                {**common_user_fields(other.user), "role": other.role}
                for other in members.get(m.team_id, [])
            ],
        }
        for m in memberships
    ]


def find_membership(db: Session, *, user_id: int, team_id: int) -> models.AllTeamMember | None:
    return (
        _active_memberships(db)
        .filter(
            models.AllTeamMember.user_id == user_id,
            models.AllTeamMember.team_id == team_id,
        )
        .first()
    )


def custom_url_taken(db: Session, custom_url: str) -> bool:
    # Deleted teams keep their url reserved
    return (
        db.query(models.AllTeam.id)
        .filter(models.AllTeam.custom_url == custom_url.lower())
        .first()
        is not None
    )


def max_teams_allowed(user: models.User) -> int:
    settings = get_settings()
    if user.patron_tier:
        return settings.max_teams_patron
    return settings.max_teams_non_patron


# ---------- Writes ----------


def create(
    db: Session,
    *,
    name: str,
    custom_url: str,
    owner_user_id: int,
    is_main_team: bool,
) -> int:
    with transaction(db):
        team = models.AllTeam(
            name=name,
            custom_url=custom_url,
            invite_code=short_nanoid(get_settings().invite_code_length),
        )
        db.add(team)
        db.flush()

        db.add(
            models.AllTeamMember(
                user_id=owner_user_id,
                team_id=team.id,
                is_owner=True,
                is_main_team=is_main_team,
            )
        )
        team_id = team.id

    logger.info("Team %s (%s) created by user %s", team_id, custom_url, owner_user_id)
    log_backend_event(
        "team_created",
        user_id=str(owner_user_id),
        metadata={"team_id": team_id, "custom_url": custom_url},
    )
    return team_id


def update(
    db: Session,
    *,
    team_id: int,
    name: str,
    custom_url: str,
    bio: str | None,
    bsky: str | None,
    css: str | None,
) -> models.AllTeam:
    team = _find_active_team(db, team_id)
    invariant(team, "Team not found")

    team.name = name
    team.custom_url = custom_url
    team.bio = bio
    team.bsky = bsky
    team.css = css
    db.commit()
    db.refresh(team)
    return team


def switch_main_team(db: Session, *, user_id: int, team_id: int) -> None:
    with transaction(db):
        current_teams = teams_by_member_user_id(db, user_id)

        team_to_switch_to = next((t for t in current_teams if t["id"] == team_id), None)
        invariant(team_to_switch_to, "User is not a member of this team")

        (
            db.query(models.AllTeamMember)
            .filter(models.AllTeamMember.user_id == user_id)
            .update({models.AllTeamMember.is_main_team: False}, synchronize_session=False)
        )
        (
            db.query(models.AllTeamMember)
            .filter(
                models.AllTeamMember.user_id == user_id,
                models.AllTeamMember.team_id == team_id,
            )
            .update({models.AllTeamMember.is_main_team: True}, synchronize_session=False)
        )


def delete(db: Session, team_id: int) -> None:
    with transaction(db):
        main_team_members = (
            db.query(models.AllTeamMember.user_id)
            .filter(
                models.AllTeamMember.team_id == team_id,
                models.AllTeamMember.left_at.is_(None),
                models.AllTeamMember.is_main_team.is_(True),
            )
            .all()
        )

        # Members keep a main team if they have a secondary one
        for member in main_team_members:
            current_teams = teams_by_member_user_id(db, member.user_id)
            team_to_switch_to = next((t for t in current_teams if t["id"] != team_id), None)
            if not team_to_switch_to:
                continue

            (
                db.query(models.AllTeamMember)
                .filter(
                    models.AllTeamMember.user_id == member.user_id,
                    models.AllTeamMember.team_id == team_to_switch_to["id"],
                )
                .update({models.AllTeamMember.is_main_team: True}, synchronize_session=False)
            )

        (
            db.query(models.AllTeamMember)
            .filter(models.AllTeamMember.team_id == team_id)
            .update({models.AllTeamMember.is_main_team: False}, synchronize_session=False)
        )

        deleted_posts = lfg.delete_posts_by_team_id(db, team_id)

        (
            db.query(models.AllTeam)
            .filter(models.AllTeam.id == team_id)
            .update({models.AllTeam.deleted_at: datetime.utcnow()}, synchronize_session=False)
        )

    logger.info("Team %s deleted (%s LFG posts removed)", team_id, deleted_posts)
    log_backend_event("team_deleted", metadata={"team_id": team_id})


def remove_team_image(db: Session, team_id: int, image_type: ImageType) -> None:
    image_field = (
        models.AllTeam.avatar_img_id if image_type == "avatar" else models.AllTeam.banner_img_id
    )

    with transaction(db):
        image_id = (
            db.query(image_field)
            .filter(models.AllTeam.id == team_id)
            .scalar()
        )

        (
            db.query(models.AllTeam)
            .filter(models.AllTeam.id == team_id)
            .update({image_field: None}, synchronize_session=False)
        )

        if image_id:
            (
                db.query(models.UnvalidatedUserSubmittedImage)
                .filter(models.UnvalidatedUserSubmittedImage.id == image_id)
                .delete(synchronize_session=False)
            )


def reset_invite_code(db: Session, team_id: int) -> str:
    invite_code = short_nanoid(get_settings().invite_code_length)
    (
        db.query(models.AllTeam)
        .filter(models.AllTeam.id == team_id)
        .update({models.AllTeam.invite_code: invite_code}, synchronize_session=False)
    )
    db.commit()
    return invite_code


def add_new_team_member(
    db: Session,
    *,
    user_id: int,
    team_id: int,
    max_teams_allowed: int,
) -> None:
    with transaction(db):
        team_count = len(teams_by_member_user_id(db, user_id))

        if team_count >= max_teams_allowed:
            raise TeamLimitError("Trying to exceed allowed team count")

        is_main_team = team_count == 0

        existing = (
            db.query(models.AllTeamMember)
            .filter(
                models.AllTeamMember.user_id == user_id,
                models.AllTeamMember.team_id == team_id,
            )
            .first()
        )
        if existing:
            # Rejoining revives the old membership row
            existing.left_at = None
            existing.is_main_team = is_main_team
        else:
            db.add(
                models.AllTeamMember(
                    user_id=user_id,
                    team_id=team_id,
                    is_main_team=is_main_team,
                )
            )

    log_backend_event(
        "team_member_added",
        user_id=str(user_id),
        metadata={"team_id": team_id},
    )


def handle_member_leaving(
    db: Session,
    *,
    user_id: int,
    team_id: int,
    new_owner_user_id: int | None = None,
) -> None:
    with transaction(db):
        current_teams = teams_by_member_user_id(db, user_id)

        team_to_leave = next((t for t in current_teams if t["id"] == team_id), None)
        invariant(team_to_leave, "User is not a member of this team")
        invariant(
            not team_to_leave["is_owner"] or new_owner_user_id,
            "New owner id must be provided when old is leaving",
        )
        invariant(new_owner_user_id != user_id, "Leaving member can't be the new owner")

        was_main_team = team_to_leave["is_main_team"]
        new_main_team = next((t for t in current_teams if t["id"] != team_id), None)
        if was_main_team and new_main_team:
            (
                db.query(models.AllTeamMember)
                .filter(
                    models.AllTeamMember.user_id == user_id,
                    models.AllTeamMember.team_id == new_main_team["id"],
                )
                .update({models.AllTeamMember.is_main_team: True}, synchronize_session=False)
            )

        (
            db.query(models.AllTeamMember)
            .filter(
                models.AllTeamMember.user_id == user_id,
                models.AllTeamMember.team_id == team_id,
            )
            .update(
                {
                    models.AllTeamMember.left_at: datetime.utcnow(),
                    models.AllTeamMember.is_main_team: False,
                    models.AllTeamMember.is_owner: False,
                    models.AllTeamMember.is_manager: False,
                },
                synchronize_session=False,
            )
        )
        if new_owner_user_id:
            (
                db.query(models.AllTeamMember)
                .filter(
                    models.AllTeamMember.user_id == new_owner_user_id,
                    models.AllTeamMember.team_id == team_id,
                )
                .update(
                    {
                        models.AllTeamMember.is_owner: True,
                        models.AllTeamMember.is_manager: False,
                    },
                    synchronize_session=False,
                )
            )

    logger.info("User %s left team %s", user_id, team_id)
