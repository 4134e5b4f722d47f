"""
Test suite for match repositories (engine/repository.py, database/repository.py)
"""

import pytest

from app import db
from database.repository import SqlMatchRepository
from engine.exceptions import MatchNotFoundError
from engine.match import BallEvent, MatchStatus, record_ball
from engine.repository import InMemoryMatchRepository


class TestInMemoryMatchRepository:

    def test_load_missing(self):
        with pytest.raises(MatchNotFoundError):
            InMemoryMatchRepository().load("nope")

    def test_save_and_load_copies(self, team_match):
        match, batting, bowling = team_match
        repo = InMemoryMatchRepository()
        repo.save(match)
        loaded = repo.load(match.id)
        loaded.status = MatchStatus.CANCELLED
        assert repo.load(match.id).status is MatchStatus.UPCOMING

    def test_list_all(self, team_match):
        match, _batting, _bowling = team_match
        repo = InMemoryMatchRepository()
        repo.save(match)
        assert [m.id for m in repo.list_all()] == [match.id]


class TestSqlMatchRepository:

    def test_round_trip(self, app, team_match):
        match, batting, bowling = team_match
        repo = SqlMatchRepository(db)
        played = record_ball(match, BallEvent(runs=4), batting, bowling)
        repo.save(played)
        loaded = repo.load(played.id)
        assert loaded.to_dict() == played.to_dict()

    def test_save_replaces(self, app, team_match):
        match, batting, bowling = team_match
        repo = SqlMatchRepository(db)
        repo.save(match)
        repo.save(record_ball(match, BallEvent(runs=6), batting, bowling))
        assert repo.load(match.id).current_inning.total_runs == 6
        assert len(repo.list_all()) == 1

    def test_load_missing(self, app):
        with pytest.raises(MatchNotFoundError):
            SqlMatchRepository(db).load("missing")
