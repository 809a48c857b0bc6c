# backend/plaza/services/tournament/bracket_view.py
from __future__ import annotations

"""
Render-ready view models for a single bracket match.

A match is shown as a header (round label plus an optional CAST / LIVE
badge) and two rows, one per opponent. This module only decides *what* is
shown; it never touches the database.
"""

from dataclasses import asdict
from typing import Iterable, Optional

from plaza.services.tournament.types import (
    BracketMatch,
    BracketProtocol,
    MatchOpponent,
    MatchType,
    TournamentProtocol,
    TournamentStream,
    TournamentTeam,
)
from plaza.services.tournament.urls import tournament_match_page, tournament_streams_page

BIG_SEED_THRESHOLD = 99
UNKNOWN_TEAM_NAME = "???"


def header_prefix(match_type: Optional[MatchType], group: Optional[str] = None) -> str:
    if match_type == "winners":
        return "WB "
    if match_type == "losers":
        return "LB "
    if match_type == "grands":
        return "GF "
    if match_type == "groups":
        return f"{group}"
    return ""


def is_bye(match: BracketMatch) -> bool:
    return not match.opponent1 or not match.opponent2


def is_match_over(match: BracketMatch) -> bool:
    return any(
        opponent is not None and opponent.result == "win"
        for opponent in (match.opponent1, match.opponent2)
    )


def _both_opponents_known(match: BracketMatch) -> bool:
    return bool(
        match.opponent1 and match.opponent1.id and match.opponent2 and match.opponent2.id
    )


def match_participants(tournament: TournamentProtocol, match: BracketMatch) -> list[int]:
    """User ids of every member of both teams of the match."""
    participants: list[int] = []
    for opponent in (match.opponent1, match.opponent2):
        if not opponent or not opponent.id:
            continue
        team = tournament.team_by_id(opponent.id)
        if team:
            participants.extend(m.user_id for m in team.members)
    return participants


def _casted_matches(tournament: TournamentProtocol):
    info = tournament.ctx.casted_matches_info
    return info.casted_matches if info else []


def is_cast_locked(tournament: TournamentProtocol, match: BracketMatch) -> bool:
    info = tournament.ctx.casted_matches_info
    if is_match_over(match) or not info:
        return False
    return match.id in (info.locked_matches or [])


def has_streams(
    tournament: TournamentProtocol,
    match: BracketMatch,
    streaming_participants: Iterable[int],
) -> bool:
    if is_match_over(match) or not _both_opponents_known(match):
        return False
    if any(cm.match_id == match.id for cm in _casted_matches(tournament)):
        return True

    participants = set(match_participants(tournament, match))
    return any(user_id in participants for user_id in streaming_participants)


def present_header(
    match: BracketMatch,
    *,
    tournament: TournamentProtocol,
    round_number: int,
    match_type: Optional[MatchType] = None,
    group: Optional[str] = None,
    streaming_participants: Iterable[int] = (),
) -> dict:
    badge = None
    if is_cast_locked(tournament, match):
        badge = {"kind": "CAST", "label": "🔒 CAST", "popover": "Match is scheduled to be casted"}
    elif has_streams(tournament, match, streaming_participants):
        badge = {"kind": "LIVE", "label": "🔴 LIVE"}

    return {
        "label": f"{header_prefix(match_type, group)}{round_number}.{match.number}",
        "badge": badge,
    }


def _row_team(
    match: BracketMatch,
    opponent: Optional[MatchOpponent],
    side: int,
    *,
    tournament: TournamentProtocol,
    bracket: BracketProtocol,
    show_simulation: bool,
) -> tuple[Optional[TournamentTeam], bool]:
    if opponent and opponent.id:
        return tournament.team_by_id(opponent.id), False

    simulated = bracket.simulated_match(match.id) if show_simulation else None
    simulated_opponent = getattr(simulated, f"opponent{side}", None) if simulated else None
    if simulated_opponent and simulated_opponent.id:
        return tournament.team_by_id(simulated_opponent.id), True
    return None, True


def present_row(
    match: BracketMatch,
    side: int,
    *,
    tournament: TournamentProtocol,
    bracket: BracketProtocol,
    show_simulation: bool,
    user_id: Optional[int] = None,
    is_preview: bool = False,
) -> dict:
    opponent: Optional[MatchOpponent] = getattr(match, f"opponent{side}")

    score = None
    if _both_opponents_known(match) and not is_preview:
        score = opponent.score if opponent.score is not None else 0

    team, simulated = _row_team(
        match,
        opponent,
        side,
        tournament=tournament,
        bracket=bracket,
        show_simulation=show_simulation,
    )
    own_team = tournament.team_member_of_by_user(user_id)
    logo_src = tournament.tournament_team_logo_src(team) if team and not simulated else None

    return {
        "side": side,
        "participant_id": team.id if team else None,
        "seed": team.seed if team else None,
        "is_big_seed": bool(team and team.seed and team.seed > BIG_SEED_THRESHOLD),
        "logo_src": logo_src,
        "name": team.name if team else UNKNOWN_TEAM_NAME,
        "title": ", ".join(m.username for m in team.members) if team else None,
        "score": score,
        "is_loser": bool(opponent and opponent.result == "loss"),
        "is_simulated": simulated,
        "is_own_team": bool(not simulated and own_team and team and own_team.id == team.id),
        "is_hidden": team is None,
    }


def present_match(
    match: BracketMatch,
    *,
    tournament: TournamentProtocol,
    bracket: BracketProtocol,
    round_number: int,
    show_simulation: bool,
    user_id: Optional[int] = None,
    match_type: Optional[MatchType] = None,
    group: Optional[str] = None,
    is_preview: bool = False,
    streaming_participants: Iterable[int] = (),
) -> dict:
    """
    Full view model of a match, or ``{"bye": True}`` when an opponent slot
    is empty.
    """
    if is_bye(match):
        return {"bye": True}

    streaming_participants = list(streaming_participants)
    rows = [
        present_row(
            match,
            side,
            tournament=tournament,
            bracket=bracket,
            show_simulation=show_simulation,
            user_id=user_id,
            is_preview=is_preview,
        )
        for side in (1, 2)
    ]

    return {
        "bye": False,
        "match_id": match.id,
        "header": present_header(
            match,
            tournament=tournament,
            round_number=round_number,
            match_type=match_type,
            group=group,
            streaming_participants=streaming_participants,
        ),
        "link": None
        if is_preview
        else tournament_match_page(tournament_id=tournament.ctx.id, match_id=match.id),
        "rows": rows,
    }


def match_streams(
    match: BracketMatch,
    *,
    tournament: TournamentProtocol,
    streams: Optional[list[TournamentStream]],
) -> dict:
    """
    Streams relevant to one match: streams of its players plus the stream of
    the account casting it. ``streams`` is None until they have been fetched.
    """
    if streams is None or not _both_opponents_known(match):
        return {"state": "loading", "message": "Loading streams..."}

    casting_account = next(
        (cm.twitch_account for cm in _casted_matches(tournament) if cm.match_id == match.id),
        None,
    )
    participants = set(match_participants(tournament, match))

    streams_of_this_match = [
        stream
        for stream in streams
        if (stream.user_id and stream.user_id in participants)
        or (casting_account is not None and stream.twitch_user_name == casting_account)
    ]

    if not streams_of_this_match:
        return {
            "state": "empty",
            "streams_page": tournament_streams_page(tournament.ctx.id),
        }

    return {
        "state": "streams",
        "streams": [asdict(stream) for stream in streams_of_this_match],
    }
