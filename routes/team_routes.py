"""Team and player route registration."""

import uuid

from flask import jsonify, request

from engine.player import Player, PLAYER_ROLES, PlayerStats
from engine.stats_aggregator import aggregate_player_stats


def register_team_routes(
    app,
    *,
    db,
    DBTeam,
    DBPlayer,
    repository,
    commentary,
):
    # ── Internal helpers ──────────────────────────────────────────────────────

    def _cumulative_players():
        """Every player with baseline stats plus figures from recorded matches."""
        players = [row.to_domain() for row in DBPlayer.query.order_by(DBPlayer.created_at).all()]
        return aggregate_player_stats(players, repository.list_all())

    def _json_body():
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else None

    # ── Teams ─────────────────────────────────────────────────────────────────

    @app.route("/api/teams", methods=["POST"])
    def create_team():
        data = _json_body()
        if data is None:
            return jsonify({"error": "Invalid or missing JSON body"}), 400

        name = str(data.get("name", "")).strip()
        if not name:
            return jsonify({"error": "Team name is required"}), 400
        team_id = str(data.get("id") or uuid.uuid4())
        if db.session.get(DBTeam, team_id) is not None:
            return jsonify({"error": f"Team {team_id} already exists"}), 400

        player_ids = data.get("players") or []
        if not isinstance(player_ids, list):
            return jsonify({"error": "players must be a list of player ids"}), 400
        rows = []
        for pid in player_ids:
            row = db.session.get(DBPlayer, pid)
            if row is None:
                return jsonify({"error": f"Unknown player: {pid}"}), 400
            rows.append(row)

        team = DBTeam(
            id=team_id,
            name=name,
            short_name=str(data.get("short_name") or name[:3]).upper(),
            player_ids=list(player_ids),
        )
        db.session.add(team)
        for row in rows:
            if row.team_id and row.team_id != team_id:
                old_team = db.session.get(DBTeam, row.team_id)
                if old_team is not None:
                    # Reassign so the JSON column change is tracked.
                    old_team.player_ids = [p for p in (old_team.player_ids or []) if p != row.id]
                    app.logger.info(f"[Teams] Moved {row.id} from {old_team.id} to {team_id}")
            row.team_id = team_id
        db.session.commit()
        app.logger.info(f"[Teams] Created team {team.name} ({team.id}) with {len(rows)} players")
        return jsonify(team.to_domain().to_dict()), 201

    @app.route("/api/teams", methods=["GET"])
    def list_teams():
        teams = DBTeam.query.order_by(DBTeam.created_at).all()
        return jsonify([t.to_domain().to_dict() for t in teams])

    # ── Players ───────────────────────────────────────────────────────────────

    @app.route("/api/players", methods=["POST"])
    def create_player():
        data = _json_body()
        if data is None:
            return jsonify({"error": "Invalid or missing JSON body"}), 400

        player_id = str(data.get("id") or uuid.uuid4())
        if db.session.get(DBPlayer, player_id) is not None:
            return jsonify({"error": f"Player {player_id} already exists"}), 400

        team_id = data.get("team_id") or ""
        team = None
        if team_id:
            team = db.session.get(DBTeam, team_id)
            if team is None:
                return jsonify({"error": "Invalid team selection"}), 400

        try:
            player = Player(
                id=player_id,
                name=str(data.get("name", "")),
                role=str(data.get("role", "")),
                team_id=team_id,
                stats=PlayerStats.from_dict(data.get("stats")),
            )
        except (TypeError, ValueError) as e:
            return jsonify({"error": str(e), "roles": PLAYER_ROLES}), 400

        db.session.add(DBPlayer.from_domain(player))
        if team is not None:
            # Reassign so the JSON column change is tracked.
            team.player_ids = list(team.player_ids or []) + [player.id]
        db.session.commit()
        app.logger.info(f"[Players] Registered {player.name} ({player.role})")
        return jsonify(player.to_dict()), 201

    @app.route("/api/players", methods=["GET"])
    def list_players():
        return jsonify([p.to_dict() for p in _cumulative_players()])

    @app.route("/api/players/<player_id>", methods=["GET"])
    def get_player(player_id):
        for player in _cumulative_players():
            if player.id == player_id:
                return jsonify(player.to_dict())
        return jsonify({"error": "Player not found"}), 404

    @app.route("/api/players/<player_id>/analysis", methods=["GET"])
    def player_analysis(player_id):
        player = next((p for p in _cumulative_players() if p.id == player_id), None)
        if player is None:
            return jsonify({"error": "Player not found"}), 404
        return jsonify({
            "player_id": player.id,
            "analysis": commentary.get_player_analysis(player.stats),
        })
