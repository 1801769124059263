import pytest

from conftest import member, payload


@pytest.fixture
def three_teams(admin_client):
    teams = [
        payload("TID100", "Code Crafters", [member("Alice", 1), member("Bob", 2)], theme="Theme 1"),
        payload("TID200", "Byte Me", [member("Cara", 3, "female"), member("Dan", 4)], theme="Theme 2"),
        payload("TID300", "Null Pointers", [member("Eve", 5, "female"), member("Finn", 6), member("Gus", 7)], theme="Theme 1"),
    ]
    for body in teams:
        assert admin_client.post("/api/register", json=body).status_code == 201
    return admin_client


def test_list_requires_admin(client):
    resp = client.get("/api/teams")
    assert resp.status_code == 401
    assert "error" in resp.json()


def test_list_all_teams_with_members(three_teams):
    resp = three_teams.get("/api/teams")
    assert resp.status_code == 200
    teams = resp.json()
    assert {t["team_id"] for t in teams} == {"TID100", "TID200", "TID300"}
    for t in teams:
        assert len(t["members"]) == t["num_teammates"]
        assert all("email" in m for m in t["members"])


def test_search_is_case_insensitive_on_name(three_teams):
    resp = three_teams.get("/api/teams", params={"search": "byte"})
    assert [t["team_id"] for t in resp.json()] == ["TID200"]


def test_search_matches_team_id(three_teams):
    resp = three_teams.get("/api/teams", params={"search": "tid3"})
    assert [t["team_id"] for t in resp.json()] == ["TID300"]


def test_search_with_theme_filter(three_teams):
    resp = three_teams.get("/api/teams", params={"search": "c", "theme": "Theme 1"})
    assert {t["team_id"] for t in resp.json()} == {"TID100"}

    resp = three_teams.get("/api/teams", params={"theme": "Theme 1"})
    assert {t["team_id"] for t in resp.json()} == {"TID100", "TID300"}


def test_search_without_match_is_empty_list(three_teams):
    resp = three_teams.get("/api/teams", params={"search": "zzz-no-such-team"})
    assert resp.status_code == 200
    assert resp.json() == []


def test_search_text_is_literal(three_teams):
    # "." would match any character as a regex
    resp = three_teams.get("/api/teams", params={"search": "Code.Crafters"})
    assert resp.json() == []
    resp = three_teams.get("/api/teams", params={"search": "(("})
    assert resp.status_code == 200
    assert resp.json() == []


def test_invalid_theme_filter(three_teams):
    resp = three_teams.get("/api/teams", params={"theme": "Theme 42"})
    assert resp.status_code == 400


def test_get_unknown_team_is_404(admin_client):
    resp = admin_client.get("/api/teams/TID-NOPE")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Team not found"}


def test_patch_attaches_submission(three_teams):
    resp = three_teams.patch(
        "/api/teams/TID200",
        json={"abstract_submission": "https://files.example.com/abstract.pdf"},
    )
    assert resp.status_code == 200
    team = resp.json()
    assert team["abstract_submission"] == "https://files.example.com/abstract.pdf"
    assert len(team["members"]) == 2

    again = three_teams.get("/api/teams/TID200").json()
    assert again["abstract_submission"] == "https://files.example.com/abstract.pdf"
    assert again["team_name"] == "Byte Me"


def test_patch_rejects_roster_fields(three_teams):
    resp = three_teams.patch("/api/teams/TID200", json={"num_teammates": 4})
    assert resp.status_code == 400
    resp = three_teams.patch("/api/teams/TID200", json={"members": []})
    assert resp.status_code == 400


def test_patch_rejects_bad_theme_and_empty_body(three_teams):
    assert three_teams.patch("/api/teams/TID200", json={"theme": "Theme 0"}).status_code == 400
    assert three_teams.patch("/api/teams/TID200", json={}).status_code == 400


def test_patch_unknown_team(admin_client):
    resp = admin_client.patch("/api/teams/TID-NOPE", json={"project_submission": "https://x.example.com/p.zip"})
    assert resp.status_code == 404


def test_delete_cascades_to_own_participants_only(three_teams, db, run):
    resp = three_teams.delete("/api/teams/TID300")
    assert resp.status_code == 200
    body = resp.json()
    assert body["deletedParticipants"] == 3
    assert body["deletedTeam"]["team_id"] == "TID300"

    assert three_teams.get("/api/teams/TID300").status_code == 404
    assert run(db["users"].count_documents({"team_id": "TID300"})) == 0
    # other teams untouched
    assert run(db["users"].count_documents({"team_id": "TID100"})) == 2
    assert run(db["users"].count_documents({"team_id": "TID200"})) == 2
    assert len(three_teams.get("/api/teams/TID100").json()["members"]) == 2
    # the admin account survives
    assert run(db["users"].count_documents({"role": "admin"})) == 1


def test_delete_unknown_team(admin_client):
    assert admin_client.delete("/api/teams/TID-NOPE").status_code == 404


def test_deleted_members_can_register_again(three_teams):
    assert three_teams.delete("/api/teams/TID100").status_code == 200
    resp = three_teams.post(
        "/api/register",
        json=payload("TID101", "Second Try", [member("Alice", 1), member("Bob", 2)]),
    )
    assert resp.status_code == 201
