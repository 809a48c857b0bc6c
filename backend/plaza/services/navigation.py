# backend/plaza/services/navigation.py
from __future__ import annotations

"""
Site navigation entries.

Each entry is (name, url, prefetch). Entries behind a feature flag are only
included while the flag is on; the order is the order shown in the menu.
"""

from dataclasses import asdict, dataclass

from plaza.config import Settings, get_settings


@dataclass(frozen=True)
class NavItem:
    name: str
    url: str
    prefetch: bool


def nav_items(settings: Settings | None = None) -> list[NavItem]:
    settings = settings or get_settings()

    items: list[NavItem | None] = [
        NavItem("settings", "settings", True),
        NavItem("luti", "luti", False) if settings.show_luti_nav_item else None,
        NavItem("sendouq", "q", False),
        NavItem("analyzer", "analyzer", True),
        NavItem("builds", "builds", True),
        NavItem("object-damage-calculator", "object-damage-calculator", True),
        NavItem("leaderboards", "leaderboards", False),
        NavItem("scrims", "scrims", False) if settings.scrims_enabled else None,
        NavItem("lfg", "lfg", False),
        NavItem("plans", "plans", False),
        NavItem("badges", "badges", False),
        NavItem("calendar", "calendar", False),
        NavItem("plus", "plus/suggestions", False),
        NavItem("u", "u", False),
        NavItem("xsearch", "xsearch", False),
        NavItem("articles", "a", False),
        NavItem("vods", "vods", False),
        NavItem("art", "art", False),
        NavItem("t", "t", False),
        NavItem("links", "links", True),
        NavItem("maps", "maps", False),
    ]
    return [item for item in items if item is not None]


def nav_items_as_dicts(settings: Settings | None = None) -> list[dict]:
    return [asdict(item) for item in nav_items(settings)]
