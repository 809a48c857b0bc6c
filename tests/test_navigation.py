"""Tests for the navigation entries."""

from plaza.config import Settings
from plaza.services.navigation import nav_items


def _names(settings: Settings) -> list[str]:
    return [item.name for item in nav_items(settings)]


def test_default_navigation_order():
    names = _names(Settings(show_luti_nav_item=False, scrims_enabled=True))
    assert names[:3] == ["settings", "sendouq", "analyzer"]
    assert names[-3:] == ["t", "links", "maps"]
    assert "luti" not in names
    assert names.index("scrims") == names.index("leaderboards") + 1


def test_luti_entry_follows_settings_when_enabled():
    names = _names(Settings(show_luti_nav_item=True))
    assert names[:2] == ["settings", "luti"]


def test_scrims_entry_dropped_when_disabled():
    items = nav_items(Settings(scrims_enabled=False))
    assert all(item is not None for item in items)
    assert "scrims" not in [item.name for item in items]


def test_prefetch_and_urls():
    by_name = {item.name: item for item in nav_items(Settings())}
    assert by_name["plus"].url == "plus/suggestions"
    assert by_name["articles"].url == "a"
    assert by_name["sendouq"].url == "q"
    assert by_name["builds"].prefetch is True
    assert by_name["calendar"].prefetch is False


def test_navigation_endpoint(client):
    r = client.get("/api/navigation")
    assert r.status_code == 200
    data = r.json()
    assert data[0] == {"name": "settings", "url": "settings", "prefetch": True}
