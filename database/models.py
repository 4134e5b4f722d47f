from datetime import datetime

from sqlalchemy.orm import relationship

from database import db
from engine.match import Match as MatchState
from engine.player import Player as PlayerRecord, PlayerStats
from engine.team import Team as TeamRecord


class Team(db.Model):
    """Cricket Team"""
    __tablename__ = 'teams'

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    short_name = db.Column(db.String(10), nullable=False)
    player_ids = db.Column(db.JSON, nullable=False, default=list)  # squad order
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    players = relationship('Player', backref='team', lazy=True)

    def to_domain(self):
        return TeamRecord(
            id=self.id,
            name=self.name,
            short_name=self.short_name,
            players=list(self.player_ids or []),
        )


class Player(db.Model):
    """Player Identity & Baseline Career Stats"""
    __tablename__ = 'players'

    id = db.Column(db.String(64), primary_key=True)
    team_id = db.Column(db.String(64), db.ForeignKey('teams.id'), nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(50), nullable=False)  # Batsman, Bowler, All-Rounder, Wicket-Keeper

    # Baseline stats; figures from recorded matches are added on read by the aggregator
    matches_played = db.Column(db.Integer, default=0)
    total_runs = db.Column(db.Integer, default=0)
    total_balls_faced = db.Column(db.Integer, default=0)
    total_wickets = db.Column(db.Integer, default=0)
    overs_bowled = db.Column(db.Float, default=0.0)
    total_runs_conceded = db.Column(db.Integer, default=0)
    highest_score = db.Column(db.Integer, default=0)
    best_bowling = db.Column(db.String(10), default="")

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_domain(self):
        return PlayerRecord(
            id=self.id,
            name=self.name,
            role=self.role,
            team_id=self.team_id or "",
            stats=PlayerStats(
                matches=self.matches_played or 0,
                runs=self.total_runs or 0,
                balls_faced=self.total_balls_faced or 0,
                wickets=self.total_wickets or 0,
                overs_bowled=self.overs_bowled or 0.0,
                runs_conceded=self.total_runs_conceded or 0,
                high_score=self.highest_score or 0,
                best_bowling=self.best_bowling or "",
            ),
        )

    @classmethod
    def from_domain(cls, player):
        s = player.stats
        return cls(
            id=player.id,
            team_id=player.team_id or None,
            name=player.name,
            role=player.role,
            matches_played=s.matches,
            total_runs=s.runs,
            total_balls_faced=s.balls_faced,
            total_wickets=s.wickets,
            overs_bowled=s.overs_bowled,
            total_runs_conceded=s.runs_conceded,
            highest_score=s.high_score,
            best_bowling=s.best_bowling,
        )


class Match(db.Model):
    """Match document; the full engine state is stored as JSON"""
    __tablename__ = 'matches'

    id = db.Column(db.String(64), primary_key=True)
    match_type = db.Column(db.String(30), nullable=False)
    status = db.Column(db.String(20), nullable=False, index=True)
    venue = db.Column(db.String(100))
    date = db.Column(db.String(30))
    document = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_domain(self):
        return MatchState.from_dict(self.document)

    def update_from(self, match):
        self.match_type = match.match_type
        self.status = match.status.value
        self.venue = match.venue
        self.date = match.date
        self.document = match.to_dict()
