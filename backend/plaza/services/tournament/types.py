# backend/plaza/services/tournament/types.py
from __future__ import annotations

"""
Plain data shapes and protocols shared by the tournament presentation code.

The bracket progression engine (advancing winners, simulated results,
check-in windows) is not part of this package. It is consumed through
TournamentProtocol and BracketProtocol so that any engine, or a test fake,
can drive the presentation functions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional, Protocol, Sequence

MatchResult = Literal["win", "loss"]
MatchType = Literal["winners", "losers", "grands", "groups"]
MapPickingStyle = Literal["AUTO_ALL", "AUTO_SZ", "AUTO_TC", "AUTO_RM", "AUTO_CB", "TO"]

ProgressStatusType = Literal[
    "MATCH",
    "CHECKIN",
    "WAITING_FOR_MATCH",
    "WAITING_FOR_CAST",
    "WAITING_FOR_ROUND",
    "WAITING_FOR_BRACKET",
    "THANKS_FOR_PLAYING",
]


@dataclass
class MatchOpponent:
    id: Optional[int] = None
    score: Optional[int] = None
    result: Optional[MatchResult] = None


@dataclass
class BracketMatch:
    id: int
    number: int
    opponent1: Optional[MatchOpponent] = None
    opponent2: Optional[MatchOpponent] = None


@dataclass
class TournamentTeamMember:
    user_id: int
    username: str
    is_owner: bool = False


@dataclass
class TournamentTeam:
    id: int
    name: str
    seed: Optional[int] = None
    members: list[TournamentTeamMember] = field(default_factory=list)
    logo_url: Optional[str] = None
    checked_in: bool = False


@dataclass
class CastedMatch:
    match_id: int
    twitch_account: str


@dataclass
class CastedMatchesInfo:
    casted_matches: list[CastedMatch] = field(default_factory=list)
    locked_matches: list[int] = field(default_factory=list)


@dataclass
class TournamentContext:
    id: int
    map_picking_style: MapPickingStyle = "AUTO_ALL"
    casted_matches_info: Optional[CastedMatchesInfo] = None


@dataclass
class TournamentStream:
    twitch_user_name: str
    viewer_count: int = 0
    thumbnail_url: Optional[str] = None
    user_id: Optional[int] = None
    started_at: Optional[datetime] = None


@dataclass
class ProgressStatus:
    """Where the user's team currently is in the tournament."""

    type: str
    opponent: Optional[str] = None
    match_id: Optional[int] = None
    bracket_idx: Optional[int] = None
    can_check_in: bool = False


class BracketProtocol(Protocol):
    name: str
    start_time: Optional[datetime]

    def simulated_match(self, match_id: int) -> Optional[BracketMatch]:
        """Match with opponents filled in from simulated earlier results."""
        ...

    def can_check_in(self, user_id: Optional[int]) -> bool:
        ...


class TournamentProtocol(Protocol):
    ctx: TournamentContext
    brackets: Sequence[BracketProtocol]

    def team_by_id(self, team_id: int) -> Optional[TournamentTeam]:
        ...

    def team_member_of_by_user(self, user_id: Optional[int]) -> Optional[TournamentTeam]:
        ...

    def tournament_team_logo_src(self, team: TournamentTeam) -> Optional[str]:
        ...

    def team_member_of_progress_status(self, user_id: Optional[int]) -> Optional[ProgressStatus]:
        ...
