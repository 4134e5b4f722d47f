"""
engine/format_config.py
=======================

Single source of truth for format-specific parameters and scoring policy.

Every engine component that needs a format-sensitive value reads from a
FormatConfig instance rather than hardcoding T20 constants.  Adding a new
format requires only a new entry in FORMAT_REGISTRY.

Usage
-----
    from engine.format_config import get_format, ScoringPolicy

    fmt = get_format(match.match_type)
    fmt.default_overs    # 20 for T20, 50 for ODI
    fmt.individual       # True for the single-pool format

    policy = ScoringPolicy.from_config(config.get("scoring"))
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Match types
# ---------------------------------------------------------------------------

T20 = "T20"
ODI = "ODI"
TEST = "Test"
SOLO_TEST = "Solo Test"
INDIVIDUAL = "Individual Player"
CUSTOM = "Custom"


# ---------------------------------------------------------------------------
# FormatConfig
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FormatConfig:
    """
    Parameterisation of a match format.

    Attributes
    ----------
    name          : canonical match type string stored on the Match
    default_overs : over limit used when the match does not set one
    individual    : True when one undivided pool both bats and bowls and the
                    bowler rotates automatically
    """
    name: str
    default_overs: int
    individual: bool = False


FORMAT_REGISTRY: Dict[str, FormatConfig] = {
    T20:        FormatConfig(T20, default_overs=20),
    ODI:        FormatConfig(ODI, default_overs=50),
    TEST:       FormatConfig(TEST, default_overs=90),
    SOLO_TEST:  FormatConfig(SOLO_TEST, default_overs=90),
    INDIVIDUAL: FormatConfig(INDIVIDUAL, default_overs=5, individual=True),
    CUSTOM:     FormatConfig(CUSTOM, default_overs=20),
}

# Short aliases accepted from API payloads.
_ALIASES: Dict[str, str] = {
    "individual": INDIVIDUAL,
    "solo": SOLO_TEST,
    "custom": CUSTOM,
    "t20": T20,
    "odi": ODI,
    "test": TEST,
}


def normalize_match_type(match_type: Optional[str]) -> str:
    """
    Map a user-supplied match type onto a registry key.
    Raises ValueError for unknown types.
    """
    if not match_type:
        return T20
    if match_type in FORMAT_REGISTRY:
        return match_type
    key = _ALIASES.get(str(match_type).strip().lower())
    if key is None:
        raise ValueError(f"match_type must be one of {list(FORMAT_REGISTRY)}")
    return key


def get_format(match_type: Optional[str]) -> FormatConfig:
    """
    Return the FormatConfig for the given match type string.
    Defaults to T20 for None or unrecognised values.
    """
    return FORMAT_REGISTRY.get(match_type or T20, FORMAT_REGISTRY[T20])


# ---------------------------------------------------------------------------
# Wicket-on-extra policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringPolicy:
    """
    How a wicket signalled on an extra delivery is treated.

    The defaults reproduce the scorer's historical behaviour: the striker is
    dismissed and the bowler credited whatever the extra kind.  A disallowed
    wicket is dropped before the ball is processed, so the replay log stores
    the effective flag.
    """
    wicket_on_wide: bool = True
    wicket_on_no_ball: bool = True
    credit_bowler_on_extras: bool = True

    @classmethod
    def from_config(cls, section: Optional[Dict[str, Any]]) -> "ScoringPolicy":
        section = section or {}
        return cls(
            wicket_on_wide=bool(section.get("wicket_on_wide", True)),
            wicket_on_no_ball=bool(section.get("wicket_on_no_ball", True)),
            credit_bowler_on_extras=bool(section.get("credit_bowler_on_extras", True)),
        )


DEFAULT_POLICY = ScoringPolicy()
