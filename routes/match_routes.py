"""Match scoring route registration."""

import threading
import uuid
import weakref

from flask import Response, jsonify, request

from engine.exceptions import (
    InvalidBallError,
    InvalidLineupError,
    MatchClosedError,
    MatchNotFoundError,
)
from engine.lineup import resolve_lineups
from engine.match import (
    BallEvent,
    assign_roles,
    cancel_match,
    create_match,
    record_ball,
    start_innings,
    swap_strike,
)
from engine.commentary_engine import build_summary_payload
from engine.scorecard import ScorecardService

ROLE_FIELDS = ("striker_id", "non_striker_id", "bowler_id")


def register_match_routes(
    app,
    *,
    db,
    DBTeam,
    DBPlayer,
    repository,
    policy,
    commentary,
):
    scorecards = ScorecardService(logger=app.logger)

    # One lock per match so two balls never interleave on the same innings.
    # Entries vanish once no request holds the lock.
    match_locks = weakref.WeakValueDictionary()
    match_locks_guard = threading.Lock()
    app.extensions["match_locks"] = match_locks

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _lock_for(match_id):
        with match_locks_guard:
            lock = match_locks.get(match_id)
            if lock is None:
                lock = threading.Lock()
                match_locks[match_id] = lock
            return lock

    def _directory():
        return [row.to_domain() for row in DBPlayer.query.order_by(DBPlayer.created_at).all()]

    def _error(exc):
        if isinstance(exc, MatchNotFoundError):
            return jsonify({"error": str(exc)}), 404
        if isinstance(exc, MatchClosedError):
            return jsonify({"error": str(exc), "status": exc.status}), 409
        return jsonify({"error": str(exc)}), 400

    def _apply(match_id, transition):
        """Load, transform and save one match under its lock."""
        with _lock_for(match_id):
            try:
                match = repository.load(match_id)
                updated = transition(match)
            except (MatchNotFoundError, MatchClosedError, InvalidBallError,
                    InvalidLineupError, ValueError) as e:
                app.logger.warning(f"[Match {match_id}] rejected: {e}")
                return _error(e)
            repository.save(updated)
        return jsonify(updated.to_dict())

    # ── Routes ────────────────────────────────────────────────────────────────

    @app.route("/api/matches", methods=["POST"])
    def create_match_route():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid or missing JSON body"}), 400

        match_id = str(data.get("id") or uuid.uuid4())
        try:
            repository.load(match_id)
            return jsonify({"error": f"Match {match_id} already exists"}), 400
        except MatchNotFoundError:
            pass

        team_a_id = data.get("team_a_id") or ""
        team_b_id = data.get("team_b_id") or ""
        team_a_roster = data.get("team_a_roster")
        team_b_roster = data.get("team_b_roster")
        for team_id, roster_key in ((team_a_id, "team_a_roster"), (team_b_id, "team_b_roster")):
            if not team_id:
                continue
            team = db.session.get(DBTeam, team_id)
            if team is None:
                return jsonify({"error": "Invalid team selection"}), 400
            if data.get(roster_key) is not None:
                continue
            # Default batting order is the squad order, limited to players
            # still affiliated with the team.
            members = {row.id for row in DBPlayer.query.filter_by(team_id=team.id).all()}
            squad = [pid for pid in (team.player_ids or []) if pid in members]
            if not squad:
                continue
            if roster_key == "team_a_roster":
                team_a_roster = squad
            else:
                team_b_roster = squad

        players = _directory()
        try:
            match = create_match(
                match_id,
                match_type=data.get("match_type"),
                max_overs=data.get("max_overs"),
                team_a_id=team_a_id,
                team_b_id=team_b_id,
                team_a_roster=team_a_roster,
                team_b_roster=team_b_roster,
                player_pool=data.get("player_pool"),
                venue=str(data.get("venue", "")),
                date=str(data.get("date", "")),
                players=players,
            )
            batting, bowling = resolve_lineups(match, players)
            match = start_innings(match, batting, bowling)
        except (InvalidLineupError, ValueError) as e:
            app.logger.warning(f"[CreateMatch] rejected: {e}")
            return jsonify({"error": str(e)}), 400

        repository.save(match)
        app.logger.info(f"[CreateMatch] {match.match_type} match {match.id} created")
        return jsonify(match.to_dict()), 201

    @app.route("/api/matches", methods=["GET"])
    def list_matches():
        return jsonify([m.to_dict() for m in repository.list_all()])

    @app.route("/api/matches/<match_id>", methods=["GET"])
    def get_match(match_id):
        try:
            return jsonify(repository.load(match_id).to_dict())
        except MatchNotFoundError as e:
            return _error(e)

    @app.route("/api/matches/<match_id>/balls", methods=["POST"])
    def record_ball_route(match_id):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid or missing JSON body"}), 400
        try:
            event = BallEvent.from_dict(data)
        except InvalidBallError as e:
            return _error(e)

        players = _directory()

        def transition(match):
            batting, bowling = resolve_lineups(match, players)
            return record_ball(match, event, batting, bowling, policy=policy)

        return _apply(match_id, transition)

    @app.route("/api/matches/<match_id>/roles", methods=["POST"])
    def assign_roles_route(match_id):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid or missing JSON body"}), 400

        overrides = {key: data[key] for key in ROLE_FIELDS if key in data}
        if not overrides:
            return jsonify({"error": f"Provide at least one of {list(ROLE_FIELDS)}"}), 400
        known = {p.id for p in _directory()}
        for key, value in overrides.items():
            if value and value not in known:
                return jsonify({"error": f"Unknown player for {key}: {value}"}), 400

        return _apply(match_id, lambda match: assign_roles(match, **overrides))

    @app.route("/api/matches/<match_id>/swap-strike", methods=["POST"])
    def swap_strike_route(match_id):
        return _apply(match_id, swap_strike)

    @app.route("/api/matches/<match_id>/cancel", methods=["POST"])
    def cancel_match_route(match_id):
        return _apply(match_id, cancel_match)

    @app.route("/api/matches/<match_id>/scorecard", methods=["GET"])
    def scorecard(match_id):
        try:
            match = repository.load(match_id)
        except MatchNotFoundError as e:
            return _error(e)

        card = scorecards.build_scorecard(match, _directory())
        if request.args.get("format") == "text":
            return Response(scorecards.export_to_txt(card), mimetype="text/plain")
        return jsonify(card)

    @app.route("/api/matches/<match_id>/summary", methods=["GET"])
    def match_summary(match_id):
        try:
            match = repository.load(match_id)
        except MatchNotFoundError as e:
            return _error(e)

        payload = build_summary_payload(match, _directory())
        return jsonify({
            "match_id": match_id,
            "payload": payload.to_dict(),
            "summary": commentary.get_match_summary(payload),
        })
