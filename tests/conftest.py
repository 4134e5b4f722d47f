"""
Pytest fixtures for CricTrack testing.
Provides reusable fixtures for the app, client, engine players and seeded data.
"""

import os
import sys

import pytest
import yaml

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app import create_app, db
from database.models import Team as DBTeam, Player as DBPlayer
from engine.lineup import resolve_lineups
from engine.match import create_match
from engine.player import Player


# ==================== Application Fixtures ====================

@pytest.fixture(scope="function")
def test_config(tmp_path):
    """Create a temporary config file for testing."""
    config_path = tmp_path / "config.yaml"
    config_data = {
        "app": {
            "secret_key": "test-secret-key-for-testing-only-12345",
            "log_dir": str(tmp_path / "logs"),
        },
        "database": {
            "uri": f"sqlite:///{(tmp_path / 'config_default.db').as_posix()}",
        },
        "scoring": {
            "wicket_on_wide": True,
            "wicket_on_no_ball": True,
            "credit_bowler_on_extras": True,
        },
        "ai": {
            "enabled": False,  # Never reach the network from tests
            "model_name": "gemini-2.0-flash",
        },
    }

    config_path.write_text(yaml.safe_dump(config_data, sort_keys=False), encoding="utf-8")
    return config_path


@pytest.fixture(scope="function")
def app(test_config, tmp_path, monkeypatch):
    """Create and configure a test Flask application instance."""
    monkeypatch.setenv("CRICTRACK_CONFIG_PATH", str(test_config))
    test_db_file = tmp_path / "pytest_app.db"
    monkeypatch.setenv("CRICTRACK_DB_URI", f"sqlite:///{test_db_file.as_posix()}")

    app = create_app()
    app.config.update({
        "TESTING": True,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    """Create a test client for the app."""
    return app.test_client()


# ==================== Engine Fixtures ====================

def make_player(pid, team_id="", role="All-Rounder", name=None):
    return Player(id=pid, name=name or f"Player {pid}", role=role, team_id=team_id)


@pytest.fixture(scope="function")
def directory():
    """Two four-man teams: a1..a4 for team A, b1..b4 for team B."""
    return (
        [make_player(f"a{i}", team_id="A") for i in range(1, 5)]
        + [make_player(f"b{i}", team_id="B") for i in range(1, 5)]
    )


@pytest.fixture(scope="function")
def team_match(directory):
    """A fresh T20 match between A and B, with lineups resolved."""
    match = create_match("m-team", match_type="T20", team_a_id="A", team_b_id="B",
                         players=directory)
    batting, bowling = resolve_lineups(match, directory)
    return match, batting, bowling


@pytest.fixture(scope="function")
def pair_pool():
    """Two independent players for individual-mode matches."""
    return [make_player("p1", name="Alice"), make_player("p2", name="Bilal")]


@pytest.fixture(scope="function")
def individual_match(pair_pool):
    """Individual match with a two-player pool and a one-over limit."""
    match = create_match("m-ind", match_type="Individual Player", max_overs=1,
                         player_pool=["p1", "p2"], players=pair_pool)
    batting, bowling = resolve_lineups(match, pair_pool)
    return match, batting, bowling


# ==================== Seeded API Data ====================

@pytest.fixture(scope="function")
def seeded_teams(app):
    """Persist two teams of three players each and return their ids."""
    teams = {"IND": ["virat", "rohit", "bumrah"], "AUS": ["smith", "head", "cummins"]}
    for team_id, player_ids in teams.items():
        db.session.add(DBTeam(id=team_id, name=f"Team {team_id}", short_name=team_id,
                              player_ids=player_ids))
        for pid in player_ids:
            db.session.add(DBPlayer(id=pid, team_id=team_id, name=pid.title(),
                                    role="All-Rounder"))
    db.session.commit()
    return teams


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
