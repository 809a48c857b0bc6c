# backend/plaza/services/tournament/roster.py
from __future__ import annotations

"""
Registered teams of one tournament, loaded from the database.

TournamentRoster covers the team lookups of TournamentProtocol. A bracket
engine wraps it to add brackets and progress statuses.
"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from plaza import models
from plaza.services.tournament.types import TournamentTeam, TournamentTeamMember


class TournamentRoster:
    def __init__(self, tournament_id: int, teams: list[TournamentTeam]):
        self.tournament_id = tournament_id
        self.teams = teams
        self._by_id = {team.id: team for team in teams}

    def team_by_id(self, team_id: int) -> Optional[TournamentTeam]:
        return self._by_id.get(team_id)

    def team_member_of_by_user(self, user_id: Optional[int]) -> Optional[TournamentTeam]:
        if user_id is None:
            return None
        for team in self.teams:
            if any(m.user_id == user_id for m in team.members):
                return team
        return None

    def tournament_team_logo_src(self, team: TournamentTeam) -> Optional[str]:
        return team.logo_url

    def participant_user_ids(self) -> set[int]:
        return {m.user_id for team in self.teams for m in team.members}


def _logo_urls(db: Session, rows: list[models.TournamentTeam]) -> dict[int, str]:
    """
    Tournament team avatar if set, otherwise the avatar of the linked team.
    Only validated images are used.
    """
    linked_team_ids = {row.team_id for row in rows if row.team_id}
    team_avatars = {}
    if linked_team_ids:
        team_avatars = {
            team.id: team.avatar_img_id
            for team in db.query(models.AllTeam).filter(models.AllTeam.id.in_(linked_team_ids))
        }

    image_ids = {
        row.id: row.avatar_img_id or team_avatars.get(row.team_id)
        for row in rows
    }
    wanted = {image_id for image_id in image_ids.values() if image_id}
    if not wanted:
        return {}

    urls = {
        img.id: img.url
        for img in db.query(models.UnvalidatedUserSubmittedImage).filter(
            models.UnvalidatedUserSubmittedImage.id.in_(wanted),
            models.UnvalidatedUserSubmittedImage.validated_at.isnot(None),
        )
    }
    return {
        team_id: urls[image_id]
        for team_id, image_id in image_ids.items()
        if image_id in urls
    }


def load_roster(db: Session, tournament_id: int) -> TournamentRoster:
    rows = (
        db.query(models.TournamentTeam)
        .options(
            selectinload(models.TournamentTeam.members).selectinload(models.TournamentTeamMember.user),
            selectinload(models.TournamentTeam.check_ins),
        )
        .filter(models.TournamentTeam.tournament_id == tournament_id)
        .order_by(models.TournamentTeam.seed.asc(), models.TournamentTeam.id.asc())
        .all()
    )
    logos = _logo_urls(db, rows)

    teams = [
        TournamentTeam(
            id=row.id,
            name=row.name,
            seed=row.seed,
            members=[
                TournamentTeamMember(
                    user_id=member.user_id,
                    username=member.user.username,
                    is_owner=member.is_owner,
                )
                for member in sorted(row.members, key=lambda m: (m.created_at, m.user_id))
            ],
            logo_url=logos.get(row.id),
            checked_in=any(c.bracket_idx is None for c in row.check_ins),
        )
        for row in rows
    ]
    return TournamentRoster(tournament_id, teams)
