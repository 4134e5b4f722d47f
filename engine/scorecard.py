# -*- coding: utf-8 -*-
"""
Scorecard Module
Builds per-innings batting and bowling cards with display rates, and renders
them as plain-text tables.
"""

from tabulate import tabulate

from engine.rates import (
    economy,
    format_over_count,
    format_rate,
    inning_balls,
    overs_notation,
    run_rate,
    strike_rate,
)


class ScorecardService:
    """Read-only views over a Match for the scoreboard and text export"""

    def __init__(self, logger=None):
        self.logger = logger

    def _log(self, message, level='info'):
        """Safely log messages if logger is available"""
        if self.logger:
            if level == 'warning':
                self.logger.warning(message)
            else:
                self.logger.info(message)

    def build_scorecard(self, match, players):
        """
        Structured scorecard for every innings of the match.

        Args:
            match (Match): Match document
            players (list): Player directory used to resolve names

        Returns:
            dict: match header plus one entry per innings with batting and
            bowling rows (rates formatted to two decimals)
        """
        names = {p.id: p.name for p in players}
        innings = []
        for index, inning in enumerate(match.innings):
            balls = inning_balls(inning)
            batting = [
                {
                    'player_id': pid,
                    'player': names.get(pid, pid),
                    'runs': e.runs,
                    'balls': e.balls,
                    'fours': e.fours,
                    'sixes': e.sixes,
                    'strike_rate': format_rate(strike_rate(e.runs, e.balls)),
                    'status': 'out' if e.is_out else 'not out',
                }
                for pid, e in inning.batsmen_stats.items()
            ]
            bowling = [
                {
                    'player_id': pid,
                    'player': names.get(pid, pid),
                    'overs': overs_notation(e.total_balls),
                    'maidens': e.maidens,
                    'runs': e.runs,
                    'wickets': e.wickets,
                    'economy': format_rate(economy(e.runs, e.total_balls)),
                }
                for pid, e in inning.bowlers_stats.items()
            ]
            innings.append({
                'number': index + 1,
                'batting_team_id': inning.batting_team_id,
                'bowling_team_id': inning.bowling_team_id,
                'score': f"{inning.total_runs}/{inning.total_wickets}",
                'overs': format_over_count(inning.overs_completed, inning.balls_in_current_over),
                'run_rate': format_rate(run_rate(inning.total_runs, balls)),
                'striker': names.get(inning.striker_id),
                'non_striker': names.get(inning.non_striker_id),
                'bowler': names.get(inning.bowler_id),
                'batting': batting,
                'bowling': bowling,
            })

        self._log(f"Built scorecard for match {match.id} ({len(innings)} innings)")
        return {
            'match_id': match.id,
            'match_type': match.match_type,
            'status': match.status.value,
            'max_overs': match.max_overs,
            'current_inning_index': match.current_inning_index,
            'innings': innings,
        }

    def export_to_txt(self, scorecard):
        """
        Render a scorecard (as returned by build_scorecard) to text tables.

        Returns:
            str: one header line plus batting and bowling grids per innings
        """
        blocks = []
        for inn in scorecard['innings']:
            if not inn['batting'] and not inn['bowling']:
                continue
            blocks.append(
                f"Innings {inn['number']}: {inn['batting_team_id']} "
                f"{inn['score']} ({inn['overs']} ov, RR {inn['run_rate']})"
            )
            bat_rows = [
                [d['player'], d['status'], d['runs'], d['balls'], d['fours'], d['sixes'], d['strike_rate']]
                for d in inn['batting']
            ]
            blocks.append(tabulate(bat_rows, headers=['Batter', '', 'R', 'B', '4s', '6s', 'SR'], tablefmt='grid'))
            bowl_rows = [
                [d['player'], d['overs'], d['maidens'], d['runs'], d['wickets'], d['economy']]
                for d in inn['bowling']
            ]
            blocks.append(tabulate(bowl_rows, headers=['Bowler', 'O', 'M', 'R', 'W', 'Econ'], tablefmt='grid'))

        if not blocks:
            return "No balls recorded yet"
        return "\n\n".join(blocks)
