"""
Test suite for Team and Player routes
Tests routes defined in routes/team_routes.py
"""

import pytest


class TestTeamRoutes:
    """Tests for team creation and listing."""

    def test_create_team(self, client):
        response = client.post("/api/teams", json={"id": "CSK", "name": "Chennai"})
        assert response.status_code == 201
        assert response.get_json()["short_name"] == "CHE"

    def test_team_name_required(self, client):
        assert client.post("/api/teams", json={"id": "X"}).status_code == 400

    def test_team_with_unknown_player(self, client):
        response = client.post("/api/teams", json={"name": "Ghosts", "players": ["casper"]})
        assert response.status_code == 400

    def test_list_teams(self, client, seeded_teams):
        teams = {t["id"]: t for t in client.get("/api/teams").get_json()}
        assert set(teams) == {"IND", "AUS"}
        assert teams["IND"]["players"] == ["virat", "rohit", "bumrah"]

    def test_player_moves_between_teams(self, client, seeded_teams):
        response = client.post("/api/teams", json={"id": "ENG", "name": "England",
                                                   "players": ["bumrah"]})
        assert response.status_code == 201
        teams = {t["id"]: t for t in client.get("/api/teams").get_json()}
        assert teams["IND"]["players"] == ["virat", "rohit"]
        assert teams["ENG"]["players"] == ["bumrah"]
        player = client.get("/api/players/bumrah").get_json()
        assert player["team_id"] == "ENG"


class TestPlayerRoutes:
    """Tests for player registration and cumulative stats."""

    def test_register_player_joins_team(self, client):
        client.post("/api/teams", json={"id": "CSK", "name": "Chennai"})
        response = client.post("/api/players", json={
            "id": "dhoni", "name": "MS Dhoni", "role": "Wicket-Keeper", "team_id": "CSK",
        })
        assert response.status_code == 201
        teams = client.get("/api/teams").get_json()
        assert teams[0]["players"] == ["dhoni"]

    def test_invalid_role(self, client):
        response = client.post("/api/players", json={"name": "Pat", "role": "Umpire"})
        assert response.status_code == 400
        assert "Batsman" in response.get_json()["roles"]

    def test_unknown_team(self, client):
        response = client.post("/api/players", json={"name": "Pat", "role": "Bowler", "team_id": "ZZZ"})
        assert response.status_code == 400

    def test_duplicate_player(self, client):
        body = {"id": "pat", "name": "Pat", "role": "Bowler"}
        client.post("/api/players", json=body)
        assert client.post("/api/players", json=body).status_code == 400

    def test_baseline_stats_kept(self, client):
        client.post("/api/players", json={
            "id": "vet", "name": "Veteran", "role": "Batsman",
            "stats": {"matches": 100, "runs": 4000, "high_score": 150},
        })
        stats = client.get("/api/players/vet").get_json()["stats"]
        assert stats["runs"] == 4000
        assert stats["high_score"] == 150

    def test_cumulative_stats_include_matches(self, client, seeded_teams):
        client.post("/api/matches", json={"id": "m1", "team_a_id": "IND", "team_b_id": "AUS"})
        client.post("/api/matches/m1/balls", json={"runs": 4})
        client.post("/api/matches/m1/balls", json={"runs": 2})

        virat = client.get("/api/players/virat").get_json()["stats"]
        assert virat["runs"] == 6
        assert virat["balls_faced"] == 2
        assert virat["matches"] == 1

        cummins = client.get("/api/players/cummins").get_json()["stats"]
        assert cummins["runs_conceded"] == 6
        assert cummins["overs_bowled"] == pytest.approx(2 / 6)

        listed = {p["id"]: p for p in client.get("/api/players").get_json()}
        assert listed["smith"]["stats"]["matches"] == 0

    def test_unknown_player(self, client):
        assert client.get("/api/players/nobody").status_code == 404
        assert client.get("/api/players/nobody/analysis").status_code == 404

    def test_analysis_fallback_when_ai_disabled(self, client, seeded_teams):
        data = client.get("/api/players/virat/analysis").get_json()
        assert data["analysis"] == "Player analysis unavailable."
