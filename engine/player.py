"""
player.py

Defines the Player class, representing a registered cricketer together with
the lifetime statistics shown on the dashboard.

Role is descriptive only; the scoring engine never enforces it.  Lifetime
stats are never touched by the ball processor (which writes per-innings stats
on the Inning instead); they are only ever re-projected by the stats
aggregator, and then on copies.

PLAYER_ROLES is exposed so that the API layer can validate input.
"""

import copy
from dataclasses import dataclass, asdict
from typing import Dict, Any, List, Optional

# -----------------------------------------------------------------------------
# 0) Constants needed by the API layer
# -----------------------------------------------------------------------------

PLAYER_ROLES: List[str] = [
    "Batsman",
    "Bowler",
    "All-Rounder",
    "Wicket-Keeper"
]

# -----------------------------------------------------------------------------
# 1) Lifetime statistics
# -----------------------------------------------------------------------------

@dataclass
class PlayerStats:
    matches: int = 0
    runs: int = 0
    balls_faced: int = 0
    wickets: int = 0
    overs_bowled: float = 0.0
    runs_conceded: int = 0
    high_score: int = 0
    best_bowling: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlayerStats":
        data = data or {}
        return cls(
            matches=int(data.get("matches", 0)),
            runs=int(data.get("runs", 0)),
            balls_faced=int(data.get("balls_faced", 0)),
            wickets=int(data.get("wickets", 0)),
            overs_bowled=float(data.get("overs_bowled", 0.0)),
            runs_conceded=int(data.get("runs_conceded", 0)),
            high_score=int(data.get("high_score", 0)),
            best_bowling=str(data.get("best_bowling", "") or ""),
        )

# -----------------------------------------------------------------------------
# 2) Player class definition
# -----------------------------------------------------------------------------

class Player:
    """
    Represents a single registered cricket player.

    Attributes:
        id (str): Stable identifier used in rosters, pools and innings stats.
        name (str): Full name of the player.
        role (str): One of PLAYER_ROLES.
        team_id (str): Team affiliation; empty for unattached players.
        stats (PlayerStats): Lifetime figures.
    """

    def __init__(
        self,
        id: str,
        name: str,
        role: str,
        team_id: str = "",
        stats: Optional[PlayerStats] = None
    ) -> None:
        # 1a) Identity
        self.id = str(id).strip()
        if not self.id:
            raise ValueError("player id must be a non-empty string")
        self.name = name.strip()
        if not self.name:
            raise ValueError("player name must be a non-empty string")

        # 1b) Role validation
        self.role = role.strip()
        if self.role not in PLAYER_ROLES:
            raise ValueError(f"role must be one of {PLAYER_ROLES}")

        # 1c) Affiliation and stats
        self.team_id = (team_id or "").strip()
        self.stats = stats if stats is not None else PlayerStats()

    def with_stats(self, stats: PlayerStats) -> "Player":
        """Return a copy of this player carrying different stats."""
        clone = copy.copy(self)
        clone.stats = stats
        return clone

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializes this Player to a dictionary for JSON transport or storage.
        """
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "team_id": self.team_id,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Constructs a Player instance from a dictionary. Expects keys:
            - id
            - name
            - role
        and optionally team_id and stats.
        """
        required_keys = {"id", "name", "role"}
        missing = required_keys - set(data.keys())
        if missing:
            raise KeyError(f"Missing keys for Player.from_dict: {missing}")

        return cls(
            id=data["id"],
            name=data["name"],
            role=data["role"],
            team_id=data.get("team_id", ""),
            stats=PlayerStats.from_dict(data.get("stats")),
        )

    def __repr__(self) -> str:
        return (
            f"Player(id={self.id!r}, name={self.name!r}, role={self.role!r}, "
            f"team_id={self.team_id!r})"
        )
