# backend/plaza/services/tournament/__init__.py
from __future__ import annotations

"""
Tournament presentation and participation.

This package provides:
- types: data shapes and the protocols a bracket engine implements
- bracket_view: match header / row / stream view models
- team_actions: the participant's next action (match, check-in, waiting)
- roster: registered teams loaded from the database
- repository: check-ins and live streams
"""

from .bracket_view import match_streams, present_match  # noqa: F401
from .roster import TournamentRoster, load_roster  # noqa: F401
from .team_actions import (  # noqa: F401
    BRACKET_CHECK_IN_ACTION,
    CHECK_IN_ACTION,
    resolve_team_action,
)
