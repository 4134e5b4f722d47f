# -----------------------------------------------------------------------------
# prompts.py
# Templates for the AI match summary and player scouting report
# -----------------------------------------------------------------------------

MATCH_SUMMARY_PROMPT = """
Provide a short, exciting cricket commentary style summary for this match situation:
{payload}

Keep it to three or four sentences. Include a prediction if the match is live.
"""

PLAYER_ANALYSIS_PROMPT = """
Analyze these cricket player statistics and provide a brief professional scout report:
{stats}

Mention strengths, weaknesses and the role the numbers suggest. Max 120 words.
"""

SYSTEM_INSTRUCTION = "You are an experienced cricket broadcaster and analyst."
