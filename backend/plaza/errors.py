# backend/plaza/errors.py
from __future__ import annotations

"""
Domain errors raised by the repositories.

API routes translate these into HTTP 400 responses; raising one inside a
``transaction`` block rolls the whole write back.
"""


class InvariantError(Exception):
    """A precondition of a write did not hold."""


class TeamLimitError(Exception):
    """The user is already a member of the maximum number of teams."""


def invariant(condition: object, message: str) -> None:
    if not condition:
        raise InvariantError(message)
