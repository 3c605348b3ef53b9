# -*- coding: utf-8 -*-
"""
Column Names

Column-name constants shared by the loaders, the feature builder and the models.
"""

# Game log identity columns
PLAYER_ID = "PLAYER_ID"
PLAYER_NAME = "PLAYER_NAME"
TEAM = "TEAM"
GAME_ID = "GAME_ID"
GAME_DATE = "GAME_DATE"
SEASON = "SEASON"
MINUTES = "MIN"
WIN_LOSS = "WL"

# Counting stats as they appear in the game logs
COUNTING_STATS = [
    "FGM", "FGA", "FG3M", "FG3A", "FTM", "FTA",
    "OREB", "DREB", "REB", "AST", "STL", "BLK", "TOV", "PF", "PTS",
]

GAME_LOG_COLUMNS = [
    PLAYER_ID, PLAYER_NAME, TEAM, GAME_ID, GAME_DATE, SEASON, MINUTES, WIN_LOSS,
] + COUNTING_STATS

# Team-game derived columns
TEAM_POSSESSIONS = "TM_POSS"
TEAM_MINUTES = "TM_MIN"
POSSESSIONS = "POSS"

# Player-season derived columns
GAMES = "G"
TEAM_GAMES = "TEAM_GAMES"
MINUTES_FRACTION = "MIN_FRAC"
GAMES_FRACTION = "GAMES_FRAC"
WIN_PCT = "WIN_PCT"
SLOT_MINUTES = "SLOT_MIN"

PARTICIPATION_FEATURES = [MINUTES_FRACTION, GAMES_FRACTION, WIN_PCT]

# Voting label columns
LABEL_PLAYER = "PLAYER"
SHARE = "SHARE"
HAS_VOTE = "HAS_VOTE"
NAME_KEY = "NAME_KEY"

# Prediction columns
VOTE_PROBABILITY = "VOTE_PROB"
MAGNITUDE = "MAGNITUDE"
EXPECTED_SHARE = "EXPECTED_SHARE"
ADJUSTED_SHARE = "ADJUSTED_SHARE"

# Playoff experience columns
MINUTES_PER_GAME = "MPG"
PLAYOFF_MINUTES = "PLAYOFF_MIN"
EXPERIENCE = "EXPERIENCE"

ID_COLUMNS = [PLAYER_ID, PLAYER_NAME, TEAM, SEASON]


def rate_column(stat: str) -> str:
    """Name of the per-100-possession rate column for a counting stat"""
    return f"{stat}_PER100"


RATE_COLUMNS = [rate_column(stat) for stat in COUNTING_STATS]
