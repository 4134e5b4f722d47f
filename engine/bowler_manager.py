"""
engine/bowler_manager.py
========================

Centralises bowler selection for the single-pool (individual) format, where
the same players rotate through batting and bowling and nobody is assigned to
bowl from outside.  In two-team matches the bowler is chosen by the scorer
through ``assign_roles`` and this class is not consulted.

Rules enforced
--------------
1. Backward scan  — the next bowler is the nearest lineup member *before* the
                    current bowler, wrapping around the lineup.
2. Exclusions     — the striker and non-striker can never be handed the ball.
3. Fallback       — if every other member is excluded, the current bowler
                    carries on.

Usage (in match.py)
-------------------
    from engine.bowler_manager import BowlerManager

    manager = BowlerManager(bowling_lineup)
    inning.bowler_id = manager.next_bowler(
        inning.bowler_id, exclude=[inning.striker_id, inning.non_striker_id]
    )
"""

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class BowlerManager:
    """
    Picks bowlers from one innings' bowling lineup.

    Parameters
    ----------
    bowling_lineup : ordered list of Player objects (or anything with ``.id``).
    """

    def __init__(self, bowling_lineup: list):
        self._lineup_ids: List[str] = [p.id for p in bowling_lineup]

    # ------------------------------------------------------------------ #
    # Public query interface                                               #
    # ------------------------------------------------------------------ #

    def opening_bowler(self) -> Optional[str]:
        """The last member of the lineup opens the bowling."""
        return self._lineup_ids[-1] if self._lineup_ids else None

    def next_bowler(self, current_id: Optional[str],
                    exclude: Iterable[Optional[str]] = ()) -> Optional[str]:
        """
        Return the id of the bowler for the next over.

        Scans backward from ``current_id`` and returns the first member not
        in ``exclude``.  When the current bowler is not in the lineup the scan
        starts from index -1, so the first candidate is the second-to-last
        member and the last member is tried last.  Returns ``current_id`` when
        nobody qualifies.
        """
        excluded = {pid for pid in exclude if pid}
        size = len(self._lineup_ids)
        if size == 0:
            return current_id

        try:
            idx = self._lineup_ids.index(current_id)
        except ValueError:
            idx = -1

        for step in range(1, size + 1):
            candidate = self._lineup_ids[(idx - step) % size]
            if candidate not in excluded:
                if candidate != current_id:
                    logger.debug(
                        "BowlerManager: %s takes over from %s (excluded=%s)",
                        candidate, current_id, sorted(excluded)
                    )
                return candidate

        logger.debug(
            "BowlerManager: every alternative excluded, %s continues", current_id
        )
        return current_id
