"""
Test suite for bowler rotation in engine/bowler_manager.py
"""

from conftest import make_player
from engine.bowler_manager import BowlerManager


def _manager(*ids):
    return BowlerManager([make_player(pid) for pid in ids])


class TestBowlerManager:

    def test_opening_bowler_is_last_in_lineup(self):
        assert _manager("x", "y", "z").opening_bowler() == "z"

    def test_opening_bowler_empty_lineup(self):
        assert _manager().opening_bowler() is None

    def test_backward_scan(self):
        assert _manager("x", "y", "z").next_bowler("z") == "y"

    def test_scan_wraps_around(self):
        assert _manager("x", "y", "z").next_bowler("x") == "z"

    def test_exclusions_skipped(self):
        assert _manager("w", "x", "y", "z").next_bowler("z", exclude=["y", "x"]) == "w"

    def test_everyone_excluded_keeps_current(self):
        assert _manager("x", "y").next_bowler("y", exclude=["x", "y"]) == "y"

    def test_unknown_current_starts_from_end(self):
        assert _manager("x", "y", "z").next_bowler("nobody") == "y"

    def test_unknown_current_tries_last_member_last(self):
        manager = _manager("x", "y", "z")
        assert manager.next_bowler("nobody", exclude=["y"]) == "x"
        assert manager.next_bowler("nobody", exclude=["x", "y"]) == "z"
