"""
engine/repository.py
====================

Storage boundary for match documents.

The engine itself never reads or writes storage; callers load a Match, run
it through the ball processor and save the result.  ``InMemoryMatchRepository``
backs the unit tests and scripted use; the Flask app uses the SQL-backed
implementation in ``database/repository.py``.
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from engine.exceptions import MatchNotFoundError
from engine.match import Match

logger = logging.getLogger(__name__)


class MatchRepository(ABC):

    @abstractmethod
    def load(self, match_id: str) -> Match:
        """Return the stored match or raise MatchNotFoundError."""

    @abstractmethod
    def save(self, match: Match) -> None:
        """Insert or replace the match with the same id."""

    @abstractmethod
    def list_all(self) -> List[Match]:
        ...


class InMemoryMatchRepository(MatchRepository):
    """Dict-backed store.  Hands out copies so callers cannot alias state."""

    def __init__(self):
        self._matches: Dict[str, Match] = {}

    def load(self, match_id: str) -> Match:
        try:
            return copy.deepcopy(self._matches[match_id])
        except KeyError:
            raise MatchNotFoundError(match_id) from None

    def save(self, match: Match) -> None:
        self._matches[match.id] = copy.deepcopy(match)
        logger.debug("Saved match %s (%s)", match.id, match.status.value)

    def list_all(self) -> List[Match]:
        return [copy.deepcopy(m) for m in self._matches.values()]
