"""Tests for the tournament quick action widget."""

import logging
from datetime import datetime

import pytest

from fakes import FakeBracket, FakeTournament, team
from plaza.services.tournament.team_actions import (
    BRACKET_CHECK_IN_ACTION,
    CHECK_IN_ACTION,
    resolve_team_action,
)
from plaza.services.tournament.types import ProgressStatus, TournamentContext

# Saturday
START = datetime(2026, 10, 17, 17, 0)


def _tournament(status, *, brackets=(), map_picking_style="AUTO_ALL"):
    return FakeTournament(
        ctx=TournamentContext(id=3, map_picking_style=map_picking_style),
        teams=[team(1, "Ink Storm", 11)],
        brackets=list(brackets),
        status=status,
    )


def test_no_status_means_no_action():
    assert resolve_team_action(_tournament(None), 11) is None


def test_match_links_to_match_page():
    action = resolve_team_action(
        _tournament(ProgressStatus(type="MATCH", opponent="Octo Crew", match_id=42)),
        11,
    )
    assert action["text"] == "vs. Octo Crew"
    assert action["link"] == {"to": "/to/3/matches/42", "label": "Go to match"}


def test_tournament_check_in_form():
    action = resolve_team_action(
        _tournament(ProgressStatus(type="CHECKIN", can_check_in=True)),
        11,
    )
    assert action["text"] == "Your team needs to check-in"
    form = action["form"]
    assert form["_action"] == CHECK_IN_ACTION
    assert form["action"] == "/to/3/register"
    assert form["test_id"] == "check-in-bracket-button"


@pytest.mark.parametrize(
    "style,expected_suffix",
    [
        ("AUTO_ALL", "(full roster & map pool picked)"),
        ("TO", "(full roster)"),
    ],
)
def test_tournament_check_in_disabled(style, expected_suffix):
    action = resolve_team_action(
        _tournament(ProgressStatus(type="CHECKIN"), map_picking_style=style),
        11,
    )
    assert "form" not in action
    assert action["disabled_button"]["popover"].endswith(expected_suffix)


def test_bracket_check_in_form():
    bracket = FakeBracket(name="Underground", start_time=START, check_in_open=True)
    action = resolve_team_action(
        _tournament(ProgressStatus(type="CHECKIN", bracket_idx=0), brackets=[bracket]),
        11,
        now=datetime(2026, 10, 17, 16, 30),
    )
    assert action["text"] == "Underground check-in"
    assert action["form"]["_action"] == BRACKET_CHECK_IN_ACTION
    assert action["form"]["fields"] == {"bracketIdx": 0}


def test_bracket_check_in_window_before_start():
    bracket = FakeBracket(name="Underground", start_time=START)
    action = resolve_team_action(
        _tournament(ProgressStatus(type="CHECKIN", bracket_idx=0), brackets=[bracket]),
        11,
        now=datetime(2026, 10, 17, 12, 0),
    )
    assert "form" not in action
    assert action["window"]["text"] == "open Sat 4:00 PM - 5:00 PM"


def test_bracket_check_in_over_after_start():
    bracket = FakeBracket(name="Underground", start_time=START)
    action = resolve_team_action(
        _tournament(ProgressStatus(type="CHECKIN", bracket_idx=0), brackets=[bracket]),
        11,
        now=datetime(2026, 10, 17, 18, 0),
    )
    assert action["notice"]["text"] == "over"


def test_out_of_range_bracket_falls_back_to_tournament_check_in():
    action = resolve_team_action(
        _tournament(ProgressStatus(type="CHECKIN", bracket_idx=5, can_check_in=True)),
        11,
    )
    assert action["form"]["_action"] == CHECK_IN_ACTION


@pytest.mark.parametrize(
    "status_type,text",
    [
        ("WAITING_FOR_MATCH", "Waiting on match"),
        ("WAITING_FOR_CAST", "Waiting on cast"),
        ("WAITING_FOR_ROUND", "Waiting on next round"),
    ],
)
def test_waiting_states(status_type, text):
    action = resolve_team_action(_tournament(ProgressStatus(type=status_type)), 11)
    assert action == {"type": status_type, "text": text, "dots": True}


def test_waiting_for_bracket_has_checkmark():
    action = resolve_team_action(_tournament(ProgressStatus(type="WAITING_FOR_BRACKET")), 11)
    assert action["checkmark"] is True
    assert action["dots"] is True


def test_thanks_for_playing():
    action = resolve_team_action(_tournament(ProgressStatus(type="THANKS_FOR_PLAYING")), 11)
    assert action["text"] == "Thank you for playing!"


def test_unexpected_status_logs_warning(caplog):
    with caplog.at_level(logging.WARNING):
        action = resolve_team_action(_tournament(ProgressStatus(type="SOMETHING_NEW")), 11)

    assert action is None
    assert "Unexpected status" in caplog.text
