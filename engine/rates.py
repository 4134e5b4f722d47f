"""
engine/rates.py
===============

Pure display helpers: overs notation and the three rate figures shown on a
scorecard.  Everything is computed from ball counts (never float overs) and
rounded half-away-from-zero with exact Decimal arithmetic so that 2-decimal
figures agree across platforms.
"""

from decimal import Decimal, ROUND_HALF_UP

_TWO_PLACES = Decimal("0.01")
BALLS_PER_OVER = 6


def _round2(value: Decimal) -> float:
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def overs_notation(balls: int) -> str:
    """Return cricket overs notation, e.g. 20 balls -> "3.2"."""
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def format_over_count(overs: int, balls: int) -> str:
    return f"{overs}.{balls}"


def run_rate(runs: int, total_balls: int) -> float:
    """Runs per over.  0.00 before the first legal delivery."""
    if total_balls == 0:
        return 0.0
    return _round2(Decimal(runs) * BALLS_PER_OVER / Decimal(total_balls))


def strike_rate(runs: int, balls: int) -> float:
    """Runs per 100 balls faced."""
    if balls == 0:
        return 0.0
    return _round2(Decimal(runs) * 100 / Decimal(balls))


def economy(runs_conceded: int, total_balls: int) -> float:
    """Runs conceded per over bowled."""
    if total_balls == 0:
        return 0.0
    return _round2(Decimal(runs_conceded) * BALLS_PER_OVER / Decimal(total_balls))


def format_rate(value: float) -> str:
    """Render a rate the way the scoreboard shows it ("10.00")."""
    return f"{value:.2f}"


def inning_balls(inning) -> int:
    """Legal deliveries bowled so far in an innings."""
    return inning.overs_completed * BALLS_PER_OVER + inning.balls_in_current_over
