# backend/plaza/utils.py
from __future__ import annotations

"""
Small shared helpers: ids, url slugs and the common user projection.
"""

import re
import secrets
import string
import unicodedata

from plaza import models

_NANOID_ALPHABET = string.ascii_letters + string.digits + "_-"


def short_nanoid(size: int = 10) -> str:
    """Random url-safe id, used for team invite codes."""
    return "".join(secrets.choice(_NANOID_ALPHABET) for _ in range(size))


def slugify(value: str) -> str:
    """
    Lowercase ascii slug for custom urls: "Team Olive!" -> "team-olive".
    """
    normalized = unicodedata.normalize("NFKD", value)
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_only.lower())
    return slug.strip("-")


def common_user_fields(user: models.User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "discord_id": user.discord_id,
        "discord_avatar": user.discord_avatar,
        "custom_url": user.custom_url,
    }
