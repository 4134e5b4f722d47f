import os
import logging
import traceback
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify

from utils.helpers import load_config, PROJECT_ROOT
from database import db
from database.models import Team as DBTeam, Player as DBPlayer
from database.repository import SqlMatchRepository
from engine.commentary_engine import CommentaryEngine
from engine.format_config import ScoringPolicy
from routes.match_routes import register_match_routes
from routes.team_routes import register_team_routes


def _setup_logging(log_dir):
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "execution.log")

    # Clear existing handlers to avoid duplicates
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    # File handler for persistent logging
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)

    # Console handler for terminal visibility
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logging.basicConfig(level=logging.DEBUG, handlers=[file_handler, console_handler])


def create_app(config_path=None):
    # --- Flask setup ---
    app = Flask(__name__)
    config = load_config(config_path)
    app_section = config.get("app", {}) or {}

    # --- Secret key setup ---
    secret = app_section.get("secret_key") or os.getenv("FLASK_SECRET_KEY")
    if not secret:
        secret = os.urandom(24).hex()
        print("[WARN] Using random Flask SECRET_KEY")
    app.config["SECRET_KEY"] = secret

    # --- Logging setup (logs to file + terminal) ---
    log_dir = app_section.get("log_dir") or "logs"
    if not os.path.isabs(log_dir):
        log_dir = os.path.join(PROJECT_ROOT, log_dir)
    _setup_logging(log_dir)

    # Attach logger to app
    app.logger = logging.getLogger("CricTrack")
    app.logger.setLevel(logging.DEBUG)

    # --- Database ---
    db_uri = os.getenv("CRICTRACK_DB_URI") or (config.get("database", {}) or {}).get("uri")
    app.config["SQLALCHEMY_DATABASE_URI"] = db_uri or "sqlite:///crictrack.db"
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    db.init_app(app)
    with app.app_context():
        db.create_all()

    # --- Engine collaborators ---
    policy = ScoringPolicy.from_config(config.get("scoring"))
    commentary = CommentaryEngine.from_config(config.get("ai"), logger=app.logger)
    repository = SqlMatchRepository(db, logger=app.logger)
    app.extensions["match_repository"] = repository

    register_team_routes(
        app,
        db=db,
        DBTeam=DBTeam,
        DBPlayer=DBPlayer,
        repository=repository,
        commentary=commentary,
    )
    register_match_routes(
        app,
        db=db,
        DBTeam=DBTeam,
        DBPlayer=DBPlayer,
        repository=repository,
        policy=policy,
        commentary=commentary,
    )

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    app.logger.info(f"CricTrack ready (db={app.config['SQLALCHEMY_DATABASE_URI']})")
    return app


# ────── Run Server ──────
if __name__ == "__main__":
    try:
        app = create_app()
        HOST = "127.0.0.1"
        PORT = 7860
        print("✅ CricTrack is up and running!")
        print(f"🌐 API available at: http://{HOST}:{PORT}")
        app.run(host=HOST, port=PORT, debug=True, use_reloader=False)
    except Exception:
        print("❌ Failed to start CricTrack:")
        traceback.print_exc()
