"""
engine/innings.py
=================

Innings state: running totals, the append-only ball log and the per-player
figures for one batting turn.

The ball log (``Inning.history``) is ground truth.  Every total on the Inning
is a cache that ``rebuild_inning`` can recompute from the log; both the live
processor and the rebuild go through ``credit_delivery`` so the crediting
rules live in exactly one place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from engine.exceptions import InvalidBallError
from engine.format_config import DEFAULT_POLICY, ScoringPolicy
from engine.rates import BALLS_PER_OVER

logger = logging.getLogger(__name__)


class ExtraType(str, Enum):
    """Closed set of delivery kinds. NONE is a ball off the bat."""

    NONE = "none"
    WIDE = "wide"
    NO_BALL = "no-ball"
    BYE = "bye"
    LEG_BYE = "leg-bye"

    @classmethod
    def parse(cls, value) -> "ExtraType":
        if value is None or value == "":
            return cls.NONE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidBallError(f"Unknown extra type: {value!r}") from None

    @property
    def is_legal(self) -> bool:
        """Counts toward the over (wides and no-balls are re-bowled)."""
        return self not in (ExtraType.WIDE, ExtraType.NO_BALL)

    @property
    def penalty(self) -> int:
        """The flat one-run extra for a wide or no-ball."""
        return 0 if self.is_legal else 1


@dataclass(frozen=True)
class BallRecord:
    """One delivery as it was scored.  Never mutated once appended."""

    runs: int
    is_wicket: bool
    extra_type: ExtraType
    batsman_id: str
    bowler_id: str

    @property
    def is_extra(self) -> bool:
        return self.extra_type is not ExtraType.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runs": self.runs,
            "is_wicket": self.is_wicket,
            "is_extra": self.is_extra,
            "extra_type": self.extra_type.value if self.is_extra else None,
            "batsman_id": self.batsman_id,
            "bowler_id": self.bowler_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BallRecord":
        extra = ExtraType.parse(data.get("extra_type"))
        return cls(
            runs=int(data["runs"]),
            is_wicket=bool(data.get("is_wicket", False)),
            extra_type=extra,
            batsman_id=data["batsman_id"],
            bowler_id=data["bowler_id"],
        )


@dataclass
class BattingEntry:
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False


@dataclass
class BowlingEntry:
    overs: int = 0      # completed overs
    balls: int = 0      # legal balls in the over in progress
    runs: int = 0
    wickets: int = 0
    maidens: int = 0

    @property
    def total_balls(self) -> int:
        return self.overs * BALLS_PER_OVER + self.balls


@dataclass
class Inning:
    batting_team_id: str
    bowling_team_id: str
    total_runs: int = 0
    total_wickets: int = 0
    overs_completed: int = 0
    balls_in_current_over: int = 0
    history: List[BallRecord] = field(default_factory=list)
    batsmen_stats: Dict[str, BattingEntry] = field(default_factory=dict)
    bowlers_stats: Dict[str, BowlingEntry] = field(default_factory=dict)
    # On-field roles
    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    over_runs_conceded: int = 0   # charged to bowlers in the over in progress

    @property
    def legal_balls(self) -> int:
        return self.overs_completed * BALLS_PER_OVER + self.balls_in_current_over

    @property
    def roles_assigned(self) -> bool:
        return self.striker_id is not None and self.bowler_id is not None

    def batting_entry(self, player_id: str) -> BattingEntry:
        return self.batsmen_stats.setdefault(player_id, BattingEntry())

    def bowling_entry(self, player_id: str) -> BowlingEntry:
        return self.bowlers_stats.setdefault(player_id, BowlingEntry())

    def is_out(self, player_id: Optional[str]) -> bool:
        entry = self.batsmen_stats.get(player_id) if player_id else None
        return bool(entry and entry.is_out)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batting_team_id": self.batting_team_id,
            "bowling_team_id": self.bowling_team_id,
            "total_runs": self.total_runs,
            "total_wickets": self.total_wickets,
            "overs_completed": self.overs_completed,
            "balls_in_current_over": self.balls_in_current_over,
            "history": [b.to_dict() for b in self.history],
            "batsmen_stats": {pid: asdict(s) for pid, s in self.batsmen_stats.items()},
            "bowlers_stats": {pid: asdict(s) for pid, s in self.bowlers_stats.items()},
            "striker_id": self.striker_id,
            "non_striker_id": self.non_striker_id,
            "bowler_id": self.bowler_id,
            "over_runs_conceded": self.over_runs_conceded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Inning":
        return cls(
            batting_team_id=data["batting_team_id"],
            bowling_team_id=data["bowling_team_id"],
            total_runs=int(data.get("total_runs", 0)),
            total_wickets=int(data.get("total_wickets", 0)),
            overs_completed=int(data.get("overs_completed", 0)),
            balls_in_current_over=int(data.get("balls_in_current_over", 0)),
            history=[BallRecord.from_dict(b) for b in data.get("history", [])],
            batsmen_stats={
                pid: BattingEntry(**s) for pid, s in (data.get("batsmen_stats") or {}).items()
            },
            bowlers_stats={
                pid: BowlingEntry(**s) for pid, s in (data.get("bowlers_stats") or {}).items()
            },
            striker_id=data.get("striker_id"),
            non_striker_id=data.get("non_striker_id"),
            bowler_id=data.get("bowler_id"),
            over_runs_conceded=int(data.get("over_runs_conceded", 0)),
        )


def credit_delivery(inning: Inning, ball: BallRecord,
                    policy: ScoringPolicy = DEFAULT_POLICY) -> bool:
    """
    Apply one ball's runs, wicket and ball counts to the innings in place.

    Does not touch roles or match status.  Returns True when this ball
    completed an over.
    """
    extra = ball.extra_type
    runs = ball.runs

    # 1) Innings total.  A wide is worth exactly its one-run penalty.
    if extra is ExtraType.WIDE:
        inning.total_runs += extra.penalty
    else:
        inning.total_runs += runs + extra.penalty

    # 2) Batting figures: byes and leg-byes are balls faced, never runs.
    batter = inning.batting_entry(ball.batsman_id)
    if extra.is_legal:
        batter.balls += 1
        if extra is ExtraType.NONE:
            batter.runs += runs
            if runs == 4:
                batter.fours += 1
            elif runs == 6:
                batter.sixes += 1

    # 3) Wicket
    if ball.is_wicket:
        inning.total_wickets += 1
        batter.is_out = True

    # 4) Bowling figures
    bowler = inning.bowling_entry(ball.bowler_id)
    conceded = extra.penalty
    if extra in (ExtraType.NONE, ExtraType.NO_BALL):
        conceded += runs
    bowler.runs += conceded
    inning.over_runs_conceded += conceded
    if ball.is_wicket and (extra is ExtraType.NONE or policy.credit_bowler_on_extras):
        bowler.wickets += 1

    # 5) Legal-delivery bookkeeping
    if not extra.is_legal:
        return False
    inning.balls_in_current_over += 1
    bowler.balls += 1
    if inning.balls_in_current_over < BALLS_PER_OVER:
        return False

    inning.overs_completed += 1
    inning.balls_in_current_over = 0
    bowler.overs += 1
    bowler.balls = 0
    if inning.over_runs_conceded == 0:
        bowler.maidens += 1
    inning.over_runs_conceded = 0
    return True


def rebuild_inning(inning: Inning, policy: ScoringPolicy = DEFAULT_POLICY) -> Inning:
    """
    Recompute every cached total and per-player figure from the ball log.

    Roles are carried over untouched; they cannot be derived from the log.
    """
    rebuilt = Inning(
        batting_team_id=inning.batting_team_id,
        bowling_team_id=inning.bowling_team_id,
        history=list(inning.history),
        striker_id=inning.striker_id,
        non_striker_id=inning.non_striker_id,
        bowler_id=inning.bowler_id,
    )
    for ball in rebuilt.history:
        credit_delivery(rebuilt, ball, policy)
    logger.debug(
        "Rebuilt innings %s from %d balls: %d/%d",
        inning.batting_team_id, len(rebuilt.history),
        rebuilt.total_runs, rebuilt.total_wickets,
    )
    return rebuilt
