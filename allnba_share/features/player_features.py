# -*- coding: utf-8 -*-

"""
Player Season Feature Builder

This module turns per-game player logs into one row per (player, season):
- Team possessions per game and their minutes-weighted split across players
- Season totals of every counting stat, minutes share, games share and win rate
- Per-100-possession rates of every counting stat
- The participation filter that keeps only regularly-used players
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from ..config import columns as cols
from ..config.model_config import MIN_MINUTES_FRACTION, MIN_GAMES_FRACTION
from ..data.loaders import compute_team_game_counts, require_columns
from ..utils.errors import PipelineDataError

logger = logging.getLogger(__name__)

# Weight applied to turnovers on top of the plain turnover count
TURNOVER_WEIGHT = 0.44

PLAYER_SEASON_KEYS = [cols.PLAYER_ID, cols.SEASON]


def compute_team_possessions(logs: pd.DataFrame) -> pd.DataFrame:
    """
    Add team possessions and team minutes for each team-game to every log row

    TmPOSS = FGA + TOV + 0.44 * TOV - OREB, summed over the team's players in
    the game.

    Args:
        logs: Player game logs

    Returns:
        pandas.DataFrame: Copy of the logs with TM_POSS and TM_MIN columns
    """
    out = logs.copy()
    contribution = (
        out["FGA"] + out["TOV"] + TURNOVER_WEIGHT * out["TOV"] - out["OREB"]
    )
    grouped = contribution.groupby([out[cols.TEAM], out[cols.GAME_ID]])
    out[cols.TEAM_POSSESSIONS] = grouped.transform("sum")
    out[cols.TEAM_MINUTES] = out.groupby([cols.TEAM, cols.GAME_ID])[cols.MINUTES].transform("sum")
    return out


def assign_player_possessions(logs: pd.DataFrame) -> pd.DataFrame:
    """
    Distribute team possessions to players by their share of a single court slot

    PlayerPOSS = (MIN / (TmMIN / 5)) * TmPOSS

    Args:
        logs: Game logs carrying TM_POSS and TM_MIN

    Returns:
        pandas.DataFrame: Copy with SLOT_MIN (TmMIN / 5) and POSS columns
    """
    out = logs.copy()
    out[cols.SLOT_MINUTES] = out[cols.TEAM_MINUTES] / 5.0
    slot = out[cols.SLOT_MINUTES].replace(0, np.nan)
    out[cols.POSSESSIONS] = (out[cols.MINUTES] / slot * out[cols.TEAM_POSSESSIONS]).fillna(0.0)
    return out


def aggregate_player_seasons(logs: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate possession-annotated game logs to one row per (player, season)

    The player's name and team are taken from the most recent game: rows are
    ordered by date descending, then game id descending, and the first is kept.

    Args:
        logs: Game logs carrying POSS and SLOT_MIN

    Returns:
        pandas.DataFrame: Player-season totals with G, MIN_FRAC and WIN_PCT
    """
    ordered = logs.sort_values(
        [cols.PLAYER_ID, cols.SEASON, cols.GAME_DATE, cols.GAME_ID],
        ascending=[True, True, False, False],
        kind="mergesort",
    )
    latest = ordered.drop_duplicates(PLAYER_SEASON_KEYS, keep="first")[
        PLAYER_SEASON_KEYS + [cols.PLAYER_NAME, cols.TEAM]
    ]

    wins = (ordered[cols.WIN_LOSS].astype(str).str.upper() == "W").astype(float)
    ordered = ordered.assign(_WIN=wins)

    sums = ordered.groupby(PLAYER_SEASON_KEYS).agg(
        **{
            cols.GAMES: (cols.GAME_ID, "nunique"),
            cols.MINUTES: (cols.MINUTES, "sum"),
            cols.SLOT_MINUTES: (cols.SLOT_MINUTES, "sum"),
            cols.POSSESSIONS: (cols.POSSESSIONS, "sum"),
            cols.WIN_PCT: ("_WIN", "mean"),
        },
        **{stat: (stat, "sum") for stat in cols.COUNTING_STATS},
    ).reset_index()

    seasons = latest.merge(sums, on=PLAYER_SEASON_KEYS, how="inner")
    slot = seasons[cols.SLOT_MINUTES].replace(0, np.nan)
    seasons[cols.MINUTES_FRACTION] = (seasons[cols.MINUTES] / slot).fillna(0.0)

    logger.info(f"Aggregated {len(logs)} game rows into {len(seasons)} player-seasons")
    return seasons


def attach_games_fraction(seasons: pd.DataFrame, team_games: pd.DataFrame) -> pd.DataFrame:
    """
    Join team-season game counts and compute each player's fraction of team games

    Args:
        seasons: Player-season totals
        team_games: TEAM, SEASON, TEAM_GAMES

    Returns:
        pandas.DataFrame: Copy with TEAM_GAMES and GAMES_FRAC

    Raises:
        PipelineDataError: If a player's season team has no game count
    """
    require_columns(team_games, [cols.TEAM, cols.SEASON, cols.TEAM_GAMES], "Team game counts")
    out = seasons.merge(
        team_games[[cols.TEAM, cols.SEASON, cols.TEAM_GAMES]],
        on=[cols.TEAM, cols.SEASON],
        how="left",
    )

    missing = out[out[cols.TEAM_GAMES].isna() | (out[cols.TEAM_GAMES] <= 0)]
    if not missing.empty:
        pairs = sorted(set(zip(missing[cols.TEAM], missing[cols.SEASON])))
        logger.error(f"No team game count for {pairs}")
        raise PipelineDataError(f"No team game count for team-seasons {pairs}")

    out[cols.GAMES_FRACTION] = out[cols.GAMES] / out[cols.TEAM_GAMES]
    over = out[cols.GAMES_FRACTION] > 1
    if over.any():
        logger.warning(f"Clipping games fraction to 1 for {int(over.sum())} player-seasons "
                       f"(traded players exceeding their final team's game count)")
        out[cols.GAMES_FRACTION] = out[cols.GAMES_FRACTION].clip(upper=1.0)
    return out


def compute_per100_rates(seasons: pd.DataFrame) -> pd.DataFrame:
    """
    Convert counting-stat totals to per-100-possession rates

    Player-seasons with no accumulated possessions are dropped first.

    Args:
        seasons: Player-season totals with POSS

    Returns:
        pandas.DataFrame: Copy with a <STAT>_PER100 column per counting stat
    """
    zero = seasons[cols.POSSESSIONS] <= 0
    if zero.any():
        for _, row in seasons[zero].iterrows():
            logger.warning(f"Dropping {row[cols.PLAYER_NAME]} ({row[cols.PLAYER_ID]}) "
                           f"in season {row[cols.SEASON]}: no possessions")
    out = seasons[~zero].copy()

    for stat in cols.COUNTING_STATS:
        out[cols.rate_column(stat)] = 100.0 * out[stat] / out[cols.POSSESSIONS]
    return out


def filter_eligible(seasons: pd.DataFrame,
                    min_minutes_fraction: float = MIN_MINUTES_FRACTION,
                    min_games_fraction: float = MIN_GAMES_FRACTION) -> pd.DataFrame:
    """
    Keep player-seasons with enough playing time for stable rate estimates

    Args:
        seasons: Player-season table with MIN_FRAC and GAMES_FRAC
        min_minutes_fraction: Exclusive lower bound on minutes fraction
        min_games_fraction: Exclusive lower bound on games fraction

    Returns:
        pandas.DataFrame: Eligible rows
    """
    mask = (
        (seasons[cols.MINUTES_FRACTION] > min_minutes_fraction)
        & (seasons[cols.GAMES_FRACTION] > min_games_fraction)
    )
    eligible = seasons[mask].copy()
    logger.info(f"Eligibility filter kept {len(eligible)} of {len(seasons)} player-seasons")
    return eligible


def build_player_seasons(logs: pd.DataFrame,
                         team_games: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """
    Build the player-season feature table from raw game logs

    Args:
        logs: Player game logs
        team_games: Precomputed team game counts (derived from the logs if None)

    Returns:
        pandas.DataFrame: One row per (player, season) with totals,
        participation ratios and per-100-possession rates (not yet filtered)
    """
    require_columns(logs, cols.GAME_LOG_COLUMNS, "Game logs")
    if logs.empty:
        raise PipelineDataError("Game logs are empty")

    if team_games is None:
        team_games = compute_team_game_counts(logs)

    annotated = assign_player_possessions(compute_team_possessions(logs))
    seasons = aggregate_player_seasons(annotated)
    seasons = attach_games_fraction(seasons, team_games)
    return compute_per100_rates(seasons)
