"""
engine/match.py
===============

The match document and the ball-by-ball state machine that advances it.

Every public operation here takes a Match and returns a *new* Match; the
argument is never mutated.  Striker, non-striker and bowler live on the
current Inning, so one call to ``record_ball`` is a complete transition from
(state, ball) to the next state.

Usage
-----
    from engine.match import BallEvent, create_match, record_ball
    from engine.lineup import resolve_lineups

    match = create_match("m1", match_type="T20", team_a_id="t1", team_b_id="t2",
                         players=directory)
    batting, bowling = resolve_lineups(match, directory)
    match = record_ball(match, BallEvent(runs=4), batting, bowling)
"""

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from engine.bowler_manager import BowlerManager
from engine.exceptions import InvalidBallError, InvalidLineupError, MatchClosedError
from engine.format_config import (
    DEFAULT_POLICY,
    ScoringPolicy,
    get_format,
    normalize_match_type,
)
from engine.innings import BallRecord, ExtraType, Inning, credit_delivery
from engine.lineup import validate_lineups

logger = logging.getLogger(__name__)

INDIVIDUAL_TEAM_ID = "IND_TEAM"

_UNSET = object()


class MatchStatus(str, Enum):
    UPCOMING = "Upcoming"
    LIVE = "Live"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# ---------------------------------------------------------------------------
# Ball event
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BallEvent:
    """What the scorer tapped for one delivery."""

    runs: int = 0
    is_wicket: bool = False
    extra_type: ExtraType = ExtraType.NONE

    def __post_init__(self):
        if isinstance(self.runs, bool) or not isinstance(self.runs, int):
            raise InvalidBallError(f"runs must be an integer, got {self.runs!r}")
        if self.runs < 0:
            raise InvalidBallError(f"runs cannot be negative, got {self.runs}")
        object.__setattr__(self, "extra_type", ExtraType.parse(self.extra_type))

    @property
    def is_extra(self) -> bool:
        return self.extra_type is not ExtraType.NONE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BallEvent":
        """
        Build an event from an API payload:
            {"runs": 1, "is_wicket": false, "is_extra": true, "extra_type": "bye"}
        """
        extra = data.get("extra_type")
        if data.get("is_extra") and not extra:
            raise InvalidBallError("is_extra is set but extra_type is missing")
        raw = data.get("runs", 0)
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise InvalidBallError(f"runs must be an integer, got {raw!r}")
        try:
            runs = int(raw)
        except (TypeError, ValueError):
            raise InvalidBallError(f"runs must be an integer, got {raw!r}") from None
        return cls(runs=runs, is_wicket=bool(data.get("is_wicket", False)), extra_type=extra)


# ---------------------------------------------------------------------------
# Match document
# ---------------------------------------------------------------------------

@dataclass
class Match:
    id: str
    team_a_id: str
    team_b_id: str
    match_type: str
    max_overs: int
    innings: List[Inning]
    venue: str = ""
    date: str = ""
    status: MatchStatus = MatchStatus.UPCOMING
    current_inning_index: int = 0
    team_a_roster: Optional[List[str]] = None   # batting order
    team_b_roster: Optional[List[str]] = None
    player_pool: Optional[List[str]] = None     # individual matches only

    @property
    def is_individual(self) -> bool:
        return get_format(self.match_type).individual

    @property
    def is_closed(self) -> bool:
        return self.status in (MatchStatus.COMPLETED, MatchStatus.CANCELLED)

    @property
    def current_inning(self) -> Inning:
        return self.innings[self.current_inning_index]

    def roster_for(self, team_id: str) -> Optional[List[str]]:
        if team_id == self.team_a_id:
            return self.team_a_roster
        if team_id == self.team_b_id:
            return self.team_b_roster
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "team_a_id": self.team_a_id,
            "team_b_id": self.team_b_id,
            "team_a_roster": self.team_a_roster,
            "team_b_roster": self.team_b_roster,
            "player_pool": self.player_pool,
            "venue": self.venue,
            "date": self.date,
            "match_type": self.match_type,
            "max_overs": self.max_overs,
            "status": self.status.value,
            "innings": [inn.to_dict() for inn in self.innings],
            "current_inning_index": self.current_inning_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        return cls(
            id=data["id"],
            team_a_id=data["team_a_id"],
            team_b_id=data["team_b_id"],
            team_a_roster=data.get("team_a_roster"),
            team_b_roster=data.get("team_b_roster"),
            player_pool=data.get("player_pool"),
            venue=data.get("venue", ""),
            date=data.get("date", ""),
            match_type=normalize_match_type(data["match_type"]),
            max_overs=int(data["max_overs"]),
            status=MatchStatus(data.get("status", MatchStatus.UPCOMING.value)),
            innings=[Inning.from_dict(i) for i in data["innings"]],
            current_inning_index=int(data.get("current_inning_index", 0)),
        )


def create_match(
    match_id: str,
    match_type: str = "T20",
    max_overs: Optional[int] = None,
    team_a_id: str = "",
    team_b_id: str = "",
    team_a_roster: Optional[List[str]] = None,
    team_b_roster: Optional[List[str]] = None,
    player_pool: Optional[List[str]] = None,
    venue: str = "",
    date: str = "",
    players: Optional[Sequence] = None,
) -> Match:
    """
    Schedule a new match with two empty innings (sides swapped for the
    second).  When ``players`` is given, both lineups are validated now so
    that an unplayable configuration never reaches the ball processor.
    """
    match_type = normalize_match_type(match_type)
    fmt = get_format(match_type)

    if max_overs is None:
        max_overs = fmt.default_overs
    if isinstance(max_overs, bool) or not isinstance(max_overs, int) or max_overs <= 0:
        raise ValueError(f"max_overs must be a positive integer, got {max_overs!r}")

    if fmt.individual:
        team_a_id = team_b_id = INDIVIDUAL_TEAM_ID
    elif not team_a_id or not team_b_id:
        raise InvalidLineupError("Standard matches need two teams")
    elif team_a_id == team_b_id:
        raise InvalidLineupError("Please select two different teams")

    first = Inning(batting_team_id=team_a_id, bowling_team_id=team_b_id)
    second = Inning(batting_team_id=team_b_id, bowling_team_id=team_a_id)

    match = Match(
        id=match_id,
        team_a_id=team_a_id,
        team_b_id=team_b_id,
        team_a_roster=list(team_a_roster) if team_a_roster is not None else None,
        team_b_roster=list(team_b_roster) if team_b_roster is not None else None,
        player_pool=list(player_pool) if player_pool is not None else None,
        venue=venue,
        date=date,
        match_type=match_type,
        max_overs=max_overs,
        innings=[first, second],
    )

    if players is not None:
        validate_lineups(match, players)

    logger.info("Scheduled %s match %s (%d overs)", match_type, match_id, max_overs)
    return match


# ---------------------------------------------------------------------------
# Role management
# ---------------------------------------------------------------------------

def _ensure_open(match: Match) -> None:
    if match.is_closed:
        raise MatchClosedError(match.id, match.status.value)


def _seed_roles(inning: Inning, batting_lineup: Sequence, bowling_lineup: Sequence,
                force: bool = False) -> None:
    if force or inning.striker_id is None:
        if not batting_lineup:
            raise InvalidLineupError("No batsman available to take strike")
        inning.striker_id = batting_lineup[0].id
        inning.non_striker_id = batting_lineup[1].id if len(batting_lineup) > 1 else None
    if force or inning.bowler_id is None:
        bowler = BowlerManager(bowling_lineup).opening_bowler()
        if bowler is None:
            raise InvalidLineupError("No bowler available to open the bowling")
        inning.bowler_id = bowler


def start_innings(match: Match, batting_lineup: Sequence, bowling_lineup: Sequence) -> Match:
    """
    Put the first two batsmen and the opening bowler on the field for the
    current innings.
    """
    _ensure_open(match)
    updated = copy.deepcopy(match)
    _seed_roles(updated.current_inning, batting_lineup, bowling_lineup, force=True)
    inning = updated.current_inning
    logger.info(
        "Match %s innings %d: %s on strike, %s non-striker, %s bowling",
        match.id, match.current_inning_index + 1,
        inning.striker_id, inning.non_striker_id, inning.bowler_id,
    )
    return updated


def assign_roles(match: Match, striker_id=_UNSET, non_striker_id=_UNSET,
                 bowler_id=_UNSET) -> Match:
    """
    Manually override any of the on-field roles.  Pass ``non_striker_id=None``
    to leave a batsman batting alone.  Omitted roles are left as they are.
    """
    _ensure_open(match)
    updated = copy.deepcopy(match)
    inning = updated.current_inning

    if striker_id is not _UNSET:
        if not striker_id:
            raise InvalidLineupError("A striker is required")
        inning.striker_id = striker_id
    if non_striker_id is not _UNSET:
        inning.non_striker_id = non_striker_id or None
    if bowler_id is not _UNSET:
        if not bowler_id:
            raise InvalidLineupError("A bowler is required")
        inning.bowler_id = bowler_id

    if inning.non_striker_id is not None and inning.non_striker_id == inning.striker_id:
        raise InvalidBallError("Striker and non-striker must be different players")

    logger.debug(
        "Match %s roles assigned: striker=%s non_striker=%s bowler=%s",
        match.id, inning.striker_id, inning.non_striker_id, inning.bowler_id,
    )
    return updated


def swap_strike(match: Match) -> Match:
    """Exchange ends between deliveries.  No-op without a non-striker."""
    _ensure_open(match)
    updated = copy.deepcopy(match)
    inning = updated.current_inning
    if inning.non_striker_id:
        inning.striker_id, inning.non_striker_id = inning.non_striker_id, inning.striker_id
    return updated


def cancel_match(match: Match) -> Match:
    _ensure_open(match)
    updated = copy.deepcopy(match)
    updated.status = MatchStatus.CANCELLED
    logger.info("Match %s cancelled", match.id)
    return updated


# ---------------------------------------------------------------------------
# Ball processor
# ---------------------------------------------------------------------------

def _effective_wicket(event: BallEvent, policy: ScoringPolicy) -> bool:
    if not event.is_wicket:
        return False
    if event.extra_type is ExtraType.WIDE and not policy.wicket_on_wide:
        logger.warning("Wicket signalled on a wide ignored by scoring policy")
        return False
    if event.extra_type is ExtraType.NO_BALL and not policy.wicket_on_no_ball:
        logger.warning("Wicket signalled on a no-ball ignored by scoring policy")
        return False
    return True


def _complete(match: Match, reason: str) -> None:
    if match.status is not MatchStatus.COMPLETED:
        inning = match.current_inning
        logger.info(
            "Match %s completed (%s): %d/%d in %d.%d overs",
            match.id, reason, inning.total_runs, inning.total_wickets,
            inning.overs_completed, inning.balls_in_current_over,
        )
    match.status = MatchStatus.COMPLETED


def _handle_wicket(match: Match, inning: Inning, dismissed: str,
                   partner: Optional[str], batting_lineup: Sequence,
                   bowling_lineup: Sequence) -> None:
    if match.is_individual:
        inning.bowler_id = BowlerManager(bowling_lineup).next_bowler(
            inning.bowler_id, exclude=[dismissed, partner]
        )

    if inning.total_wickets >= len(batting_lineup):
        _complete(match, "all out")
        return

    excluded = {dismissed, partner}
    incoming = next(
        (p for p in batting_lineup if p.id not in excluded and not inning.is_out(p.id)),
        None,
    )
    if incoming is not None:
        inning.striker_id = incoming.id
        inning.non_striker_id = partner
        logger.debug("Match %s: %s comes in for %s", match.id, incoming.id, dismissed)
    elif partner:
        # Last man standing bats on alone.
        inning.striker_id = partner
        inning.non_striker_id = None
        logger.debug("Match %s: %s bats on without a partner", match.id, partner)
    else:
        _complete(match, "no batsman left")


def record_ball(
    match: Match,
    event: BallEvent,
    batting_lineup: Sequence,
    bowling_lineup: Sequence,
    policy: ScoringPolicy = DEFAULT_POLICY,
    raise_if_closed: bool = True,
) -> Match:
    """
    Apply one delivery to the current innings and return the updated match.

    Closed matches raise MatchClosedError, or with ``raise_if_closed=False``
    come back as an unchanged copy.
    """
    if match.is_closed:
        if raise_if_closed:
            raise MatchClosedError(match.id, match.status.value)
        logger.info("Ignoring ball for closed match %s", match.id)
        return copy.deepcopy(match)

    updated = copy.deepcopy(match)
    inning = updated.current_inning
    if not inning.roles_assigned:
        _seed_roles(inning, batting_lineup, bowling_lineup)
    if updated.status is MatchStatus.UPCOMING:
        updated.status = MatchStatus.LIVE

    if event.extra_type is ExtraType.WIDE and event.runs:
        logger.warning("Wide recorded with runs=%d; a wide is worth exactly one run", event.runs)

    striker = inning.striker_id
    partner = inning.non_striker_id
    is_wicket = _effective_wicket(event, policy)

    ball = BallRecord(
        runs=event.runs,
        is_wicket=is_wicket,
        extra_type=event.extra_type,
        batsman_id=striker,
        bowler_id=inning.bowler_id,
    )
    inning.history.append(ball)
    over_complete = credit_delivery(inning, ball, policy)

    if event.extra_type.is_legal:
        if event.runs % 2 == 1 and inning.non_striker_id:
            inning.striker_id, inning.non_striker_id = inning.non_striker_id, inning.striker_id

        if over_complete:
            # The batsman at the non-striker's end for this ball faces next over.
            if partner:
                inning.striker_id, inning.non_striker_id = partner, striker
            if updated.is_individual:
                inning.bowler_id = BowlerManager(bowling_lineup).next_bowler(
                    inning.bowler_id, exclude=[striker, partner]
                )
            logger.debug(
                "Match %s: end of over %d, %d/%d",
                updated.id, inning.overs_completed, inning.total_runs, inning.total_wickets,
            )
            if inning.overs_completed >= updated.max_overs:
                _complete(updated, "over limit reached")

    if is_wicket:
        _handle_wicket(updated, inning, striker, partner, batting_lineup, bowling_lineup)

    return updated


def record_balls(match: Match, events: Sequence[BallEvent], batting_lineup: Sequence,
                 bowling_lineup: Sequence, policy: ScoringPolicy = DEFAULT_POLICY) -> Match:
    """Apply a sequence of deliveries in order; stops quietly once the match closes."""
    for event in events:
        if match.is_closed:
            break
        match = record_ball(match, event, batting_lineup, bowling_lineup, policy)
    return match
