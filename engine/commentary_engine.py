"""
engine/commentary_engine.py
===========================

AI-generated match summaries and player scouting reports via Gemini.

Never called from the ball processor; the API asks for a summary on demand
with a snapshot of the current state.  Every failure (SDK error, empty reply,
AI disabled in config) degrades to a fixed fallback string.

Usage
-----
    engine = CommentaryEngine.from_config(config.get("ai"))
    payload = build_summary_payload(match, players)
    text = engine.get_match_summary(payload)
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from google import genai
from google.genai import types

from engine.prompts import MATCH_SUMMARY_PROMPT, PLAYER_ANALYSIS_PROMPT, SYSTEM_INSTRUCTION
from engine.rates import format_over_count

DEFAULT_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME", "gemini-2.0-flash")

SUMMARY_FALLBACK = "AI insights currently unavailable."
ANALYSIS_FALLBACK = "Player analysis unavailable."


@dataclass
class SummaryPayload:
    match_type: str
    score: str          # "runs/wickets"
    overs: str          # "overs.balls"
    on_strike: Optional[str]
    off_strike: str     # "N/A" without a non-striker
    bowler: Optional[str]

    def to_dict(self):
        return asdict(self)


def build_summary_payload(match, players: Sequence) -> SummaryPayload:
    """Snapshot of the current innings with role ids replaced by player names."""
    names = {p.id: p.name for p in players}
    inning = match.current_inning
    return SummaryPayload(
        match_type=match.match_type,
        score=f"{inning.total_runs}/{inning.total_wickets}",
        overs=format_over_count(inning.overs_completed, inning.balls_in_current_over),
        on_strike=names.get(inning.striker_id),
        off_strike=names.get(inning.non_striker_id, "N/A") if inning.non_striker_id else "N/A",
        bowler=names.get(inning.bowler_id),
    )


class CommentaryEngine:
    def __init__(self, client=None, model_name: str = DEFAULT_MODEL_NAME,
                 enabled: bool = True, api_key: Optional[str] = None, logger=None):
        self.model_name = model_name
        self.enabled = enabled
        self.logger = logger or logging.getLogger(__name__)
        self._client = client
        self._api_key = api_key

    @classmethod
    def from_config(cls, section, logger=None) -> "CommentaryEngine":
        section = section or {}
        return cls(
            model_name=section.get("model_name") or DEFAULT_MODEL_NAME,
            enabled=bool(section.get("enabled", True)),
            api_key=section.get("api_key") or None,
            logger=logger,
        )

    def _get_client(self):
        # Created lazily so a missing GEMINI_API_KEY only matters when a summary is requested.
        if self._client is None:
            if self._api_key:
                self._client = genai.Client(api_key=self._api_key)
            else:
                self._client = genai.Client()
        return self._client

    def _generate(self, prompt: str) -> str:
        response = self._get_client().models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                max_output_tokens=256,
                temperature=0.8,
            ),
        )
        return (getattr(response, "text", None) or "").strip()

    def _ask(self, prompt: str, fallback: str) -> str:
        if not self.enabled:
            self.logger.debug("AI summaries disabled; returning fallback")
            return fallback
        try:
            text = self._generate(prompt)
        except Exception as e:
            self.logger.error(f"Gemini Error: {e}")
            return fallback
        if not text:
            self.logger.warning("Gemini returned an empty response")
            return fallback
        return text

    def get_match_summary(self, payload: SummaryPayload) -> str:
        prompt = MATCH_SUMMARY_PROMPT.format(payload=json.dumps(payload.to_dict()))
        return self._ask(prompt, SUMMARY_FALLBACK)

    def get_player_analysis(self, stats) -> str:
        """``stats`` is a PlayerStats or a plain dict of figures."""
        data = stats.to_dict() if hasattr(stats, "to_dict") else dict(stats)
        prompt = PLAYER_ANALYSIS_PROMPT.format(stats=json.dumps(data))
        return self._ask(prompt, ANALYSIS_FALLBACK)
