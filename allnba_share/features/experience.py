# -*- coding: utf-8 -*-
"""
Playoff Experience Score

Scores each team by how many playoff minutes its rotation has logged in
earlier seasons.
"""

import logging

import pandas as pd

from ..config import columns as cols
from ..config.model_config import ROTATION_SIZE, MIN_GAMES_FRACTION
from ..data.loaders import require_columns
from ..utils.errors import PipelineDataError

logger = logging.getLogger(__name__)


def select_rotation(regular_logs: pd.DataFrame, season: int,
                    rotation_size: int = ROTATION_SIZE,
                    min_games_fraction: float = MIN_GAMES_FRACTION) -> pd.DataFrame:
    """
    Pick each team's rotation for a season

    The rotation is the top rotation_size players by minutes per game among
    players who appeared in more than min_games_fraction of the team's games.
    Ties are broken by player id.

    Args:
        regular_logs: Regular-season player game logs
        season: Season to select
        rotation_size: Players kept per team
        min_games_fraction: Exclusive lower bound on games fraction

    Returns:
        pandas.DataFrame: TEAM, PLAYER_ID, PLAYER_NAME, G, MPG per rotation player
    """
    require_columns(regular_logs, [cols.PLAYER_ID, cols.PLAYER_NAME, cols.TEAM,
                                   cols.GAME_ID, cols.SEASON, cols.MINUTES], "Regular-season logs")
    logs = regular_logs[regular_logs[cols.SEASON] == season]
    if logs.empty:
        raise PipelineDataError(f"No regular-season logs for season {season}")

    team_games = logs.groupby(cols.TEAM)[cols.GAME_ID].nunique()
    stints = logs.groupby([cols.TEAM, cols.PLAYER_ID]).agg(
        **{
            cols.PLAYER_NAME: (cols.PLAYER_NAME, "last"),
            cols.GAMES: (cols.GAME_ID, "nunique"),
            cols.MINUTES: (cols.MINUTES, "sum"),
        }
    ).reset_index()
    stints[cols.MINUTES_PER_GAME] = stints[cols.MINUTES] / stints[cols.GAMES]
    stints[cols.GAMES_FRACTION] = stints[cols.GAMES] / stints[cols.TEAM].map(team_games)

    qualified = stints[stints[cols.GAMES_FRACTION] > min_games_fraction]
    rotation = (
        qualified.sort_values([cols.TEAM, cols.MINUTES_PER_GAME, cols.PLAYER_ID],
                              ascending=[True, False, True], kind="mergesort")
        .groupby(cols.TEAM)
        .head(rotation_size)
        .reset_index(drop=True)
    )
    return rotation[[cols.TEAM, cols.PLAYER_ID, cols.PLAYER_NAME, cols.GAMES, cols.MINUTES_PER_GAME]].copy()


def compute_playoff_experience(regular_logs: pd.DataFrame, playoff_logs: pd.DataFrame,
                               season: int, rotation_size: int = ROTATION_SIZE,
                               min_games_fraction: float = MIN_GAMES_FRACTION) -> pd.DataFrame:
    """
    Average prior playoff minutes of each team's rotation

    Args:
        regular_logs: Regular-season player game logs (used to pick rotations)
        playoff_logs: Playoff player game logs for earlier seasons
        season: Season whose teams are scored; only playoff minutes from
            earlier seasons count
        rotation_size: Players kept per team
        min_games_fraction: Exclusive lower bound on games fraction

    Returns:
        pandas.DataFrame: TEAM, SEASON, EXPERIENCE sorted by EXPERIENCE descending
    """
    require_columns(playoff_logs, [cols.PLAYER_ID, cols.SEASON, cols.MINUTES], "Playoff logs")
    rotation = select_rotation(regular_logs, season, rotation_size, min_games_fraction)

    prior = playoff_logs[playoff_logs[cols.SEASON] < season]
    career_minutes = prior.groupby(cols.PLAYER_ID)[cols.MINUTES].sum()
    rotation[cols.PLAYOFF_MINUTES] = rotation[cols.PLAYER_ID].map(career_minutes).fillna(0.0)

    experience = (
        rotation.groupby(cols.TEAM)[cols.PLAYOFF_MINUTES]
        .mean()
        .rename(cols.EXPERIENCE)
        .reset_index()
    )
    experience[cols.SEASON] = season
    experience = experience.sort_values([cols.EXPERIENCE, cols.TEAM],
                                        ascending=[False, True]).reset_index(drop=True)

    logger.info(f"Computed playoff experience for {len(experience)} teams in season {season}")
    return experience[[cols.TEAM, cols.SEASON, cols.EXPERIENCE]]
