import logging
from typing import List, Sequence

import pandas as pd

from engine.player import Player, PlayerStats

logger = logging.getLogger(__name__)

BATTING_COLUMNS = ["match_id", "player_id", "runs", "balls"]
BOWLING_COLUMNS = ["match_id", "player_id", "wickets", "overs", "runs"]


def _parse_figures(figures):
    """'3/25' -> (3, 25); None for blank or malformed figures."""
    try:
        wickets, runs = str(figures).split("/")
        return int(wickets), int(runs)
    except ValueError:
        return None


class StatsAggregator:
    """
    Folds the per-innings figures of a set of matches into lifetime
    PlayerStats.  Build once per set of matches, apply to any player list.
    """

    def __init__(self, matches):
        self.match_count = len(matches)
        self.batting_df, self.bowling_df = self._build_frames(matches)

    def _build_frames(self, matches):
        bat_rows, bowl_rows = [], []
        for match in matches:
            for inning in match.innings:
                for pid, entry in inning.batsmen_stats.items():
                    bat_rows.append({
                        "match_id": match.id, "player_id": pid,
                        "runs": entry.runs, "balls": entry.balls,
                    })
                for pid, entry in inning.bowlers_stats.items():
                    bowl_rows.append({
                        "match_id": match.id, "player_id": pid,
                        "wickets": entry.wickets,
                        "overs": entry.overs + entry.balls / 6,
                        "runs": entry.runs,
                    })
        return (
            pd.DataFrame(bat_rows, columns=BATTING_COLUMNS),
            pd.DataFrame(bowl_rows, columns=BOWLING_COLUMNS),
        )

    def _calculate_batting_stats(self):
        if self.batting_df.empty:
            return pd.DataFrame(columns=["runs", "balls", "hs"])
        return self.batting_df.groupby("player_id").agg(
            runs=("runs", "sum"), balls=("balls", "sum"), hs=("runs", "max"),
        )

    def _calculate_bowling_stats(self):
        if self.bowling_df.empty:
            return pd.DataFrame(columns=["wickets", "overs", "runs", "best"])
        stats = self.bowling_df.groupby("player_id").agg(
            wickets=("wickets", "sum"), overs=("overs", "sum"), runs=("runs", "sum"),
        )
        # Best figures: most wickets, then fewest runs.
        best = (
            self.bowling_df.sort_values(["wickets", "runs"], ascending=[False, True])
            .groupby("player_id")
            .first()
        )
        stats["best"] = best.apply(lambda row: f"{int(row['wickets'])}/{int(row['runs'])}", axis=1)
        return stats

    def _appearances(self):
        played = pd.concat(
            [self.batting_df[["match_id", "player_id"]], self.bowling_df[["match_id", "player_id"]]],
            ignore_index=True,
        ).drop_duplicates()
        return played.groupby("player_id").size()

    def apply(self, players: Sequence[Player]) -> List[Player]:
        """Return copies of ``players`` with the aggregated deltas added."""
        if self.match_count == 0:
            return [p.with_stats(PlayerStats(**p.stats.to_dict())) for p in players]

        batting = self._calculate_batting_stats()
        bowling = self._calculate_bowling_stats()
        appearances = self._appearances()

        updated = []
        for player in players:
            stats = PlayerStats(**player.stats.to_dict())
            pid = player.id

            if pid in batting.index:
                row = batting.loc[pid]
                stats.runs += int(row["runs"])
                stats.balls_faced += int(row["balls"])
                stats.high_score = max(stats.high_score, int(row["hs"]))

            if pid in bowling.index:
                row = bowling.loc[pid]
                stats.wickets += int(row["wickets"])
                stats.overs_bowled += float(row["overs"])
                stats.runs_conceded += int(row["runs"])
                current = _parse_figures(stats.best_bowling)
                candidate = _parse_figures(row["best"])
                if current is None or (candidate[0], -candidate[1]) > (current[0], -current[1]):
                    stats.best_bowling = row["best"]

            if pid in appearances.index:
                stats.matches += int(appearances.loc[pid])

            updated.append(player.with_stats(stats))

        logger.debug(
            "Aggregated %d match(es) into %d player record(s)", self.match_count, len(updated)
        )
        return updated


def aggregate_player_stats(players: Sequence[Player], matches) -> List[Player]:
    """
    Cumulative stats: each player's baseline plus everything recorded in
    ``matches``.  Neither argument is modified.
    """
    return StatsAggregator(matches).apply(players)
