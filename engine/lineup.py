"""
engine/lineup.py
================

Resolves the ordered batting and bowling lineups for the current innings.

Standard matches use the per-team roster stored on the match (its order is
the batting order) and fall back to every player affiliated with the team.
Individual matches use the configured player pool for both sides and fall
back to the whole player directory.
"""

import logging
from typing import Dict, List, Sequence

from engine.exceptions import InvalidLineupError
from engine.player import Player

logger = logging.getLogger(__name__)

BATTING = "batting"
BOWLING = "bowling"
SIDES = (BATTING, BOWLING)


def _by_id(players: Sequence[Player]) -> Dict[str, Player]:
    return {p.id: p for p in players}


def _from_ids(ids, directory: Dict[str, Player]) -> List[Player]:
    lineup = [directory[pid] for pid in ids if pid in directory]
    dropped = len(ids) - len(lineup)
    if dropped:
        logger.warning("Lineup references %d unknown player id(s); ignoring them", dropped)
    return lineup


def resolve_lineup(match, players: Sequence[Player], side: str) -> List[Player]:
    """
    Return the ordered lineup for ``side`` ("batting" or "bowling") of the
    match's current innings.
    """
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}")

    directory = _by_id(players)

    if match.is_individual:
        if match.player_pool is not None:
            return _from_ids(match.player_pool, directory)
        return list(players)

    inning = match.current_inning
    team_id = inning.batting_team_id if side == BATTING else inning.bowling_team_id
    roster = match.roster_for(team_id)
    if roster is not None:
        return _from_ids(roster, directory)
    return [p for p in players if p.team_id == team_id]


def resolve_lineups(match, players: Sequence[Player]):
    """Convenience: ``(batting_lineup, bowling_lineup)`` for the current innings."""
    return (
        resolve_lineup(match, players, BATTING),
        resolve_lineup(match, players, BOWLING),
    )


def validate_lineups(match, players: Sequence[Player]) -> None:
    """
    Reject a configuration where either side has nobody to pick from.

    Called when a match is created or an innings is started, never while
    balls are being processed.
    """
    for side in SIDES:
        if not resolve_lineup(match, players, side):
            raise InvalidLineupError(
                f"Match {match.id}: the {side} side has no eligible players"
            )
