# backend/plaza/services/tournament/urls.py
from __future__ import annotations


def tournament_page(tournament_id: int) -> str:
    return f"/to/{tournament_id}"


def tournament_match_page(*, tournament_id: int, match_id: int) -> str:
    return f"{tournament_page(tournament_id)}/matches/{match_id}"


def tournament_register_page(tournament_id: int) -> str:
    return f"{tournament_page(tournament_id)}/register"


def tournament_streams_page(tournament_id: int) -> str:
    return f"{tournament_page(tournament_id)}/streams"
