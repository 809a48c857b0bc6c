# backend/plaza/services/tournament/team_actions.py
from __future__ import annotations

"""
Quick action shown to a tournament participant: what their team should do
next (play a match, check in) or what it is waiting on.

Form actions posted back to the tournament routes are discriminated by
``_action``:
- CHECK_IN: tournament-wide check-in, posted to the register page
- BRACKET_CHECK_IN: check-in to a single bracket, posted to the bracket page
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from plaza.services.tournament.types import BracketProtocol, ProgressStatus, TournamentProtocol
from plaza.services.tournament.urls import tournament_match_page, tournament_register_page

logger = logging.getLogger(__name__)

CHECK_IN_ACTION = "CHECK_IN"
BRACKET_CHECK_IN_ACTION = "BRACKET_CHECK_IN"
CHECK_IN_TEST_ID = "check-in-bracket-button"

# Bracket check-in opens this long before the bracket starts
BRACKET_CHECK_IN_WINDOW = timedelta(hours=1)

_WAITING_MESSAGES = {
    "WAITING_FOR_MATCH": "Waiting on match",
    "WAITING_FOR_CAST": "Waiting on cast",
    "WAITING_FOR_ROUND": "Waiting on next round",
}


def _format_time(value: datetime, *, with_weekday: bool = False) -> str:
    hour = value.hour % 12 or 12
    text = f"{hour}:{value:%M} {'AM' if value.hour < 12 else 'PM'}"
    return f"{value:%a} {text}" if with_weekday else text


def _bracket_at(tournament: TournamentProtocol, idx: Optional[int]) -> Optional[BracketProtocol]:
    if idx is None or idx < 0 or idx >= len(tournament.brackets):
        return None
    return tournament.brackets[idx]


def _tournament_check_in(tournament: TournamentProtocol, status: ProgressStatus) -> dict:
    action: dict = {
        "type": "CHECKIN",
        "spaced": "very",
        "text": "Your team needs to check-in",
    }
    if status.can_check_in:
        action["form"] = {
            "method": "post",
            "action": tournament_register_page(tournament.ctx.id),
            "fields": {"bracketIdx": status.bracket_idx},
            "_action": CHECK_IN_ACTION,
            "label": "Check-in now",
            "test_id": CHECK_IN_TEST_ID,
        }
        return action

    if tournament.ctx.map_picking_style != "TO":
        reason = (
            "Can't check-in, registration needs to be finished by the captain "
            "(full roster & map pool picked)"
        )
    else:
        reason = "Can't check-in, registration needs to be finished by the captain (full roster)"
    action["disabled_button"] = {"label": "Check-in now", "popover": reason}
    return action


def _bracket_check_in(
    bracket: BracketProtocol,
    status: ProgressStatus,
    *,
    user_id: Optional[int],
    now: datetime,
) -> dict:
    action: dict = {
        "type": "CHECKIN",
        "spaced": "very",
        "text": f"{bracket.name} check-in",
    }
    if bracket.can_check_in(user_id):
        action["form"] = {
            "method": "post",
            "action": None,
            "fields": {"bracketIdx": status.bracket_idx},
            "_action": BRACKET_CHECK_IN_ACTION,
            "label": "Check-in",
            "test_id": CHECK_IN_TEST_ID,
        }
    elif bracket.start_time and bracket.start_time > now:
        opens_at = bracket.start_time - BRACKET_CHECK_IN_WINDOW
        action["window"] = {
            "opens_at": opens_at,
            "closes_at": bracket.start_time,
            "text": f"open {_format_time(opens_at, with_weekday=True)} - {_format_time(bracket.start_time)}",
        }
    elif bracket.start_time and bracket.start_time < now:
        action["notice"] = {"text": "over", "variant": "warning"}
    return action


def resolve_team_action(
    tournament: TournamentProtocol,
    user_id: Optional[int],
    *,
    now: Optional[datetime] = None,
) -> Optional[dict]:
    """
    Map the user's team progress status to an action widget, or None when
    there is nothing to show.
    """
    status = tournament.team_member_of_progress_status(user_id)
    if not status:
        return None

    if status.type == "MATCH":
        return {
            "type": "MATCH",
            "spaced": "very",
            "text": f"vs. {status.opponent}",
            "link": {
                "to": tournament_match_page(
                    tournament_id=tournament.ctx.id,
                    match_id=status.match_id,
                ),
                "label": "Go to match",
            },
        }

    if status.type == "CHECKIN":
        bracket = _bracket_at(tournament, status.bracket_idx)
        if not bracket:
            return _tournament_check_in(tournament, status)
        return _bracket_check_in(
            bracket,
            status,
            user_id=user_id,
            now=now or datetime.now(bracket.start_time.tzinfo if bracket.start_time else None),
        )

    if status.type in _WAITING_MESSAGES:
        return {"type": status.type, "text": _WAITING_MESSAGES[status.type], "dots": True}

    if status.type == "WAITING_FOR_BRACKET":
        return {
            "type": status.type,
            "spaced": True,
            "checkmark": True,
            "text": "Checked in, waiting on bracket",
            "dots": True,
        }

    if status.type == "THANKS_FOR_PLAYING":
        return {"type": status.type, "text": "Thank you for playing!"}

    logger.warning("Unexpected status: %s", status)
    return None
