"""
engine/exceptions.py
====================

Error taxonomy for the scoring engine.

Normal cricket situations (no non-striker to promote, nobody left to bat)
are policy branches inside the ball processor and never raise.  The errors
below cover configuration mistakes and calls that arrive too late.
"""


class ScoringError(Exception):
    """Base class for every error raised by the scoring engine."""


class InvalidLineupError(ScoringError):
    """A side resolved to zero eligible players, or a role id is not usable."""


class MatchClosedError(ScoringError):
    """A ball or role change was submitted for a Completed/Cancelled match."""

    def __init__(self, match_id, status):
        self.match_id = match_id
        self.status = status
        super().__init__(f"Match {match_id} is {status}; no further balls accepted")


class InvalidBallError(ScoringError):
    """The ball event itself is malformed (negative runs, unknown extra...)."""


class MatchNotFoundError(ScoringError):
    """The repository has no match with the requested id."""

    def __init__(self, match_id):
        self.match_id = match_id
        super().__init__(f"Match {match_id} not found")
