"""Tests for the bracket match view models."""

import pytest

from fakes import FakeBracket, FakeTournament, team
from plaza.services.tournament.bracket_view import (
    header_prefix,
    match_streams,
    present_match,
)
from plaza.services.tournament.types import (
    BracketMatch,
    CastedMatch,
    CastedMatchesInfo,
    MatchOpponent,
    TournamentContext,
    TournamentStream,
)


@pytest.fixture()
def tournament():
    return FakeTournament(
        ctx=TournamentContext(id=7),
        teams=[
            team(1, "Ink Storm", 11, 12, logo="https://img.example/1.png"),
            team(2, "Octo Crew", 21, 22),
            team(3, "Big Seeds", 31, seed=120, logo="https://img.example/3.png"),
        ],
    )


def _match(op1=None, op2=None, match_id=100, number=3):
    return BracketMatch(id=match_id, number=number, opponent1=op1, opponent2=op2)


def _present(tournament, match, bracket=None, **kwargs):
    kwargs.setdefault("round_number", 2)
    kwargs.setdefault("show_simulation", False)
    return present_match(match, tournament=tournament, bracket=bracket or FakeBracket(), **kwargs)


@pytest.mark.parametrize(
    "match_type,group,expected",
    [
        ("winners", None, "WB "),
        ("losers", None, "LB "),
        ("grands", None, "GF "),
        ("groups", "A", "A"),
        (None, None, ""),
    ],
)
def test_header_prefix(match_type, group, expected):
    assert header_prefix(match_type, group) == expected


def test_bye_when_opponent_missing(tournament):
    assert _present(tournament, _match(MatchOpponent(id=1), None)) == {"bye": True}


def test_header_label_and_link(tournament):
    view = _present(
        tournament,
        _match(MatchOpponent(id=1), MatchOpponent(id=2)),
        match_type="winners",
    )
    assert view["header"]["label"] == "WB 2.3"
    assert view["header"]["badge"] is None
    assert view["link"] == "/to/7/matches/100"

    preview = _present(tournament, _match(MatchOpponent(id=1), MatchOpponent(id=2)), is_preview=True)
    assert preview["link"] is None
    assert [row["score"] for row in preview["rows"]] == [None, None]


def test_rows_scores_and_loser(tournament):
    view = _present(
        tournament,
        _match(
            MatchOpponent(id=1, score=2, result="win"),
            MatchOpponent(id=2, result="loss"),
        ),
        user_id=21,
    )
    first, second = view["rows"]
    assert (first["name"], first["score"], first["is_loser"]) == ("Ink Storm", 2, False)
    assert (second["name"], second["score"], second["is_loser"]) == ("Octo Crew", 0, True)
    assert first["logo_src"] == "https://img.example/1.png"
    assert first["title"] == "player11, player12"
    assert second["is_own_team"] is True
    assert first["is_own_team"] is False


def test_unknown_opponent_without_simulation(tournament):
    view = _present(tournament, _match(MatchOpponent(id=1), MatchOpponent()))
    row = view["rows"][1]
    assert row["name"] == "???"
    assert row["is_hidden"] is True
    assert row["is_simulated"] is True
    assert view["rows"][0]["score"] is None


def test_simulated_opponent(tournament):
    bracket = FakeBracket(
        simulated={100: _match(MatchOpponent(id=1), MatchOpponent(id=3))},
    )
    view = _present(
        tournament,
        _match(MatchOpponent(id=1), MatchOpponent()),
        bracket=bracket,
        show_simulation=True,
        user_id=31,
    )
    row = view["rows"][1]
    assert row["name"] == "Big Seeds"
    assert row["is_simulated"] is True
    assert row["logo_src"] is None
    assert row["is_own_team"] is False
    assert row["is_big_seed"] is True


def test_cast_lock_beats_live_badge(tournament):
    tournament.ctx.casted_matches_info = CastedMatchesInfo(
        casted_matches=[CastedMatch(match_id=100, twitch_account="caster")],
        locked_matches=[100],
    )
    view = _present(tournament, _match(MatchOpponent(id=1), MatchOpponent(id=2)))
    assert view["header"]["badge"]["kind"] == "CAST"


def test_live_badge_from_streaming_participant(tournament):
    match = _match(MatchOpponent(id=1), MatchOpponent(id=2))
    assert _present(tournament, match, streaming_participants=[22])["header"]["badge"]["kind"] == "LIVE"
    assert _present(tournament, match, streaming_participants=[31])["header"]["badge"] is None


def test_no_badges_once_over(tournament):
    tournament.ctx.casted_matches_info = CastedMatchesInfo(
        casted_matches=[CastedMatch(match_id=100, twitch_account="caster")],
        locked_matches=[100],
    )
    match = _match(MatchOpponent(id=1, result="win"), MatchOpponent(id=2, result="loss"))
    assert _present(tournament, match, streaming_participants=[11])["header"]["badge"] is None


def test_match_streams_states(tournament):
    tournament.ctx.casted_matches_info = CastedMatchesInfo(
        casted_matches=[CastedMatch(match_id=100, twitch_account="caster")],
    )
    match = _match(MatchOpponent(id=1), MatchOpponent(id=2))
    streams = [
        TournamentStream(twitch_user_name="caster"),
        TournamentStream(twitch_user_name="p12", user_id=12),
        TournamentStream(twitch_user_name="p31", user_id=31),
    ]

    assert match_streams(match, tournament=tournament, streams=None)["state"] == "loading"
    assert (
        match_streams(_match(MatchOpponent(id=1), MatchOpponent()), tournament=tournament, streams=streams)["state"]
        == "loading"
    )

    result = match_streams(match, tournament=tournament, streams=streams)
    assert result["state"] == "streams"
    assert [s["twitch_user_name"] for s in result["streams"]] == ["caster", "p12"]

    empty = match_streams(match, tournament=tournament, streams=[streams[2]])
    assert empty == {"state": "empty", "streams_page": "/to/7/streams"}
