"""
Test suite for Match routes
Tests routes defined in routes/match_routes.py
"""

import gc


# ==================== Helpers ====================

def _create(client, **overrides):
    body = {"id": "m1", "team_a_id": "IND", "team_b_id": "AUS", "max_overs": 2}
    body.update(overrides)
    return client.post("/api/matches", json=body)


def _ball(client, match_id="m1", **ball):
    return client.post(f"/api/matches/{match_id}/balls", json=ball)


# ==================== Tests ====================

class TestMatchCreationRoute:
    """Tests for scheduling a match."""

    def test_create_match(self, client, seeded_teams):
        response = _create(client)
        assert response.status_code == 201
        data = response.get_json()
        assert data["status"] == "Upcoming"
        assert data["team_a_roster"] == ["virat", "rohit", "bumrah"]
        inning = data["innings"][0]
        assert inning["striker_id"] == "virat"
        assert inning["non_striker_id"] == "rohit"
        assert inning["bowler_id"] == "cummins"

    def test_moved_player_leaves_old_roster(self, client, seeded_teams):
        client.post("/api/players", json={"id": "root", "name": "Joe Root", "role": "Batsman"})
        client.post("/api/teams", json={"id": "ENG", "name": "England",
                                        "players": ["bumrah", "root"]})
        response = _create(client, team_b_id="ENG")
        assert response.status_code == 201
        data = response.get_json()
        assert data["team_a_roster"] == ["virat", "rohit"]
        assert data["team_b_roster"] == ["bumrah", "root"]
        assert set(data["team_a_roster"]).isdisjoint(data["team_b_roster"])

    def test_create_generates_id(self, client, seeded_teams):
        response = client.post("/api/matches", json={"team_a_id": "IND", "team_b_id": "AUS"})
        assert response.status_code == 201
        assert response.get_json()["id"]
        assert response.get_json()["max_overs"] == 20

    def test_unknown_team(self, client, seeded_teams):
        assert _create(client, team_b_id="ENG").status_code == 400

    def test_same_team_twice(self, client, seeded_teams):
        assert _create(client, team_b_id="IND").status_code == 400

    def test_duplicate_id(self, client, seeded_teams):
        _create(client)
        assert _create(client).status_code == 400

    def test_invalid_match_type(self, client, seeded_teams):
        assert _create(client, match_type="Hundred").status_code == 400

    def test_empty_pool_rejected(self, client, seeded_teams):
        response = client.post("/api/matches", json={"match_type": "individual", "player_pool": []})
        assert response.status_code == 400

    def test_missing_body(self, client):
        response = client.post("/api/matches", data="nope", content_type="text/plain")
        assert response.status_code == 400


class TestBallRoute:
    """Tests for recording deliveries."""

    def test_record_boundary(self, client, seeded_teams):
        _create(client)
        response = _ball(client, runs=4)
        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "Live"
        assert data["innings"][0]["total_runs"] == 4
        assert data["innings"][0]["batsmen_stats"]["virat"]["fours"] == 1

    def test_state_is_persisted(self, client, seeded_teams):
        _create(client)
        _ball(client, runs=1)
        _ball(client, runs=1, is_extra=True, extra_type="wide")
        data = client.get("/api/matches/m1").get_json()
        inning = data["innings"][0]
        assert inning["total_runs"] == 2
        assert inning["striker_id"] == "rohit"
        assert len(inning["history"]) == 2

    def test_invalid_ball(self, client, seeded_teams):
        _create(client)
        assert _ball(client, runs=-2).status_code == 400
        assert _ball(client, runs=0, extra_type="beamer").status_code == 400
        assert _ball(client, runs=2.7).status_code == 400

    def test_unknown_match(self, client, seeded_teams):
        assert _ball(client, match_id="ghost", runs=1).status_code == 404
        assert client.get("/api/matches/ghost").status_code == 404

    def test_all_out_closes_match(self, client, seeded_teams):
        _create(client)
        for _ in range(3):
            response = _ball(client, runs=0, is_wicket=True)
        assert response.get_json()["status"] == "Completed"

        closed = _ball(client, runs=1)
        assert closed.status_code == 409
        assert closed.get_json()["status"] == "Completed"

    def test_individual_match(self, client, seeded_teams):
        response = client.post("/api/matches", json={
            "id": "solo", "match_type": "individual", "max_overs": 1,
            "player_pool": ["virat", "smith"],
        })
        assert response.status_code == 201
        for _ in range(6):
            data = _ball(client, match_id="solo", runs=1).get_json()
        assert data["status"] == "Completed"
        assert data["innings"][0]["striker_id"] == "virat"


class TestRoleRoutes:
    """Tests for manual role changes, strike swaps and cancellation."""

    def test_assign_bowler(self, client, seeded_teams):
        _create(client)
        response = client.post("/api/matches/m1/roles", json={"bowler_id": "head"})
        assert response.status_code == 200
        assert response.get_json()["innings"][0]["bowler_id"] == "head"

    def test_unknown_player_rejected(self, client, seeded_teams):
        _create(client)
        response = client.post("/api/matches/m1/roles", json={"bowler_id": "warne"})
        assert response.status_code == 400

    def test_same_batsman_twice_rejected(self, client, seeded_teams):
        _create(client)
        response = client.post("/api/matches/m1/roles",
                               json={"striker_id": "rohit", "non_striker_id": "rohit"})
        assert response.status_code == 400

    def test_empty_role_payload(self, client, seeded_teams):
        _create(client)
        assert client.post("/api/matches/m1/roles", json={}).status_code == 400

    def test_swap_strike(self, client, seeded_teams):
        _create(client)
        response = client.post("/api/matches/m1/swap-strike")
        inning = response.get_json()["innings"][0]
        assert inning["striker_id"] == "rohit"
        assert inning["non_striker_id"] == "virat"

    def test_cancel(self, client, seeded_teams):
        _create(client)
        response = client.post("/api/matches/m1/cancel")
        assert response.get_json()["status"] == "Cancelled"
        assert _ball(client, runs=1).status_code == 409
        assert client.post("/api/matches/m1/cancel").status_code == 409

    def test_match_locks_released(self, app, client, seeded_teams):
        _create(client)
        _ball(client, runs=1)
        client.post("/api/matches/m1/cancel")
        gc.collect()
        assert "m1" not in app.extensions["match_locks"]


class TestScorecardAndSummaryRoutes:
    """Tests for read-only views."""

    def test_scorecard_json(self, client, seeded_teams):
        _create(client)
        _ball(client, runs=6)
        data = client.get("/api/matches/m1/scorecard").get_json()
        first = data["innings"][0]
        assert first["score"] == "6/0"
        assert first["run_rate"] == "36.00"
        assert first["striker"] == "Virat"

    def test_scorecard_text(self, client, seeded_teams):
        _create(client)
        _ball(client, runs=4)
        response = client.get("/api/matches/m1/scorecard?format=text")
        assert response.mimetype == "text/plain"
        assert b"Innings 1: IND 4/0" in response.data

    def test_summary_fallback_when_ai_disabled(self, client, seeded_teams):
        _create(client)
        _ball(client, runs=2)
        data = client.get("/api/matches/m1/summary").get_json()
        assert data["summary"] == "AI insights currently unavailable."
        assert data["payload"]["score"] == "2/0"
        assert data["payload"]["on_strike"] == "Virat"

    def test_list_matches(self, client, seeded_teams):
        _create(client)
        _create(client, id="m2")
        ids = {m["id"] for m in client.get("/api/matches").get_json()}
        assert ids == {"m1", "m2"}

    def test_health(self, client):
        assert client.get("/health").get_json() == {"status": "ok"}
