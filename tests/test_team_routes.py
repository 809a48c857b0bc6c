"""Tests for the /api/teams routes."""

from plaza import models


def _auth(user: models.User) -> dict:
    return {"X-User-Id": str(user.id)}


def _create_team(client, user, name="Team Olive"):
    return client.post("/api/teams", json={"name": name}, headers=_auth(user))


def test_create_team_slugifies_name(client, make_user):
    owner = make_user()
    r = _create_team(client, owner, "Team Olive!")
    assert r.status_code == 200
    data = r.json()
    assert data["custom_url"] == "team-olive"
    assert data["invite_code"]
    assert data["members"][0]["is_main_team"] is True


def test_create_team_duplicate_url(client, make_user):
    owner, other = make_user(), make_user()
    assert _create_team(client, owner).status_code == 200
    r = _create_team(client, other, "team olive")
    assert r.status_code == 400


def test_create_team_limit(client, make_user):
    owner = make_user()
    assert _create_team(client, owner, "One").status_code == 200
    assert _create_team(client, owner, "Two").status_code == 200
    r = _create_team(client, owner, "Three")
    assert r.status_code == 400
    assert r.json()["detail"] == "Trying to exceed allowed team count"


def test_patron_can_have_more_teams(client, make_user):
    patron = make_user(patron_tier=2)
    for name in ("One", "Two", "Three"):
        assert _create_team(client, patron, name).status_code == 200


def test_invite_code_only_visible_to_owner(client, make_user):
    owner, visitor = make_user(), make_user()
    _create_team(client, owner)

    r = client.get("/api/teams/TEAM-OLIVE", headers=_auth(owner))
    assert r.status_code == 200
    assert r.json()["invite_code"]

    r = client.get("/api/teams/team-olive", headers=_auth(visitor))
    assert r.json()["invite_code"] is None

    assert client.get("/api/teams/missing").status_code == 404


def test_join_leave_and_main_team(client, make_user):
    owner, player = make_user(), make_user()
    invite_code = _create_team(client, owner, "Alpha").json()["invite_code"]
    _create_team(client, player, "Beta")

    r = client.post("/api/teams/alpha/join", json={"invite_code": "wrong"}, headers=_auth(player))
    assert r.status_code == 400

    r = client.post("/api/teams/alpha/join", json={"invite_code": invite_code}, headers=_auth(player))
    assert r.status_code == 200

    r = client.post("/api/teams/alpha/main", headers=_auth(player))
    assert r.status_code == 200
    teams = {t["custom_url"]: t for t in client.get(f"/api/users/{player.id}/teams").json()}
    assert set(teams) == {"alpha", "beta"}

    r = client.post("/api/teams/alpha/leave", json={}, headers=_auth(owner))
    assert r.status_code == 400

    r = client.post(
        "/api/teams/alpha/leave",
        json={"new_owner_user_id": player.id},
        headers=_auth(owner),
    )
    assert r.status_code == 200
    members = client.get("/api/teams/alpha").json()["members"]
    assert [(m["id"], m["is_owner"]) for m in members] == [(player.id, True)]


def test_update_and_delete_permissions(client, make_user):
    owner, stranger = make_user(), make_user()
    _create_team(client, owner)

    r = client.patch("/api/teams/team-olive", json={"name": "Hacked"}, headers=_auth(stranger))
    assert r.status_code == 403

    r = client.patch(
        "/api/teams/team-olive",
        json={"name": "Team Lime", "bio": "We paint"},
        headers=_auth(owner),
    )
    assert r.status_code == 200
    assert r.json()["custom_url"] == "team-lime"

    assert client.delete("/api/teams/team-lime", headers=_auth(stranger)).status_code == 403
    assert client.delete("/api/teams/team-lime", headers=_auth(owner)).status_code == 200
    assert client.get("/api/teams").json() == []


def test_reset_invite_code_route(client, make_user):
    owner = make_user()
    before = _create_team(client, owner).json()["invite_code"]
    r = client.post("/api/teams/team-olive/reset-invite-code", headers=_auth(owner))
    assert r.status_code == 200
    assert r.json()["invite_code"] != before


def test_remove_image_route_validates_type(client, make_user):
    owner = make_user()
    _create_team(client, owner)
    assert client.delete("/api/teams/team-olive/images/logo", headers=_auth(owner)).status_code == 422
    assert client.delete("/api/teams/team-olive/images/banner", headers=_auth(owner)).status_code == 200


def test_leave_naming_self_as_owner_is_rejected(client, make_user):
    owner = make_user()
    _create_team(client, owner)

    r = client.post(
        "/api/teams/team-olive/leave",
        json={"new_owner_user_id": owner.id},
        headers=_auth(owner),
    )
    assert r.status_code == 400
    members = client.get("/api/teams/team-olive").json()["members"]
    assert [(m["id"], m["is_owner"]) for m in members] == [(owner.id, True)]


def test_update_strips_padded_name(client, make_user):
    owner = make_user()
    _create_team(client, owner)

    r = client.patch("/api/teams/team-olive", json={"name": "  Team Lime  "}, headers=_auth(owner))
    assert r.status_code == 200
    assert r.json()["name"] == "Team Lime"
    assert r.json()["custom_url"] == "team-lime"
