# -*- coding: utf-8 -*-
"""
Season Standardizer

This module rescales per-100-possession rates to within-season z-scores so that
players are compared only with their own season's cohort. Statistics are
computed into an explicit lookup (season -> stat -> (mean, std)) and then
applied to a copy of the table.
"""

import logging
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import columns as cols
from ..utils.errors import EmptyCohortError, PipelineDataError

logger = logging.getLogger(__name__)

SeasonStatistics = Dict[int, Dict[str, Tuple[float, float]]]

# Standard deviations at or below this are treated as a degenerate cohort
MIN_STD = 1e-12


def compute_season_statistics(df: pd.DataFrame, columns: Sequence[str]) -> SeasonStatistics:
    """
    Compute the mean and sample standard deviation of each column per season

    Args:
        df: Cohort rows
        columns: Columns to summarize

    Returns:
        SeasonStatistics: {season: {column: (mean, std)}}
    """
    grouped = df.groupby(cols.SEASON)[list(columns)]
    means = grouped.mean()
    stds = grouped.std(ddof=1)

    statistics: SeasonStatistics = {}
    for season in means.index:
        statistics[int(season)] = {
            column: (float(means.at[season, column]), float(stds.at[season, column]))
            for column in columns
        }
    return statistics


def apply_season_statistics(df: pd.DataFrame, statistics: SeasonStatistics,
                            columns: Sequence[str]) -> pd.DataFrame:
    """
    Replace each column with its z-score under its own season's statistics

    A stat with zero or undefined spread in a season is set to 0 for that season.

    Args:
        df: Rows to standardize
        statistics: Output of compute_season_statistics
        columns: Columns to replace

    Returns:
        pandas.DataFrame: Standardized copy

    Raises:
        PipelineDataError: If a season in df has no statistics
    """
    out = df.copy()
    seasons = out[cols.SEASON].astype(int)

    missing = sorted(set(seasons.unique()) - set(statistics))
    if missing:
        raise PipelineDataError(f"No standardization statistics for seasons {missing}")

    for column in columns:
        means = seasons.map(lambda s: statistics[s][column][0])
        stds = seasons.map(lambda s: statistics[s][column][1])

        degenerate = stds.isna() | (stds <= MIN_STD)
        if degenerate.any():
            for season in sorted(seasons[degenerate].unique()):
                logger.warning(f"Zero variance in {column} for season {season}; using z-score 0")

        z = (out[column] - means) / stds.where(~degenerate, 1.0)
        out[column] = z.where(~degenerate, 0.0).astype(float)

    return out


def standardize_by_season(df: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """
    Standardize columns within each season of df using df itself as the cohort

    Args:
        df: Cohort rows
        columns: Columns to standardize

    Returns:
        pandas.DataFrame: Standardized copy
    """
    if df.empty:
        raise EmptyCohortError("Cannot standardize an empty cohort")
    return apply_season_statistics(df, compute_season_statistics(df, columns), columns)


def _training_rows(eligible: pd.DataFrame, prediction_season: Optional[int]) -> pd.DataFrame:
    if prediction_season is None:
        return eligible
    return eligible[eligible[cols.SEASON] != prediction_season]


def build_magnitude_cohort(eligible: pd.DataFrame, columns: Sequence[str],
                           prediction_season: Optional[int] = None) -> pd.DataFrame:
    """
    Vote-getters outside the prediction season, standardized among themselves

    Args:
        eligible: Eligible, labelled player-seasons
        columns: Rate columns to standardize
        prediction_season: Season held out of fitting

    Returns:
        pandas.DataFrame: Standardized magnitude cohort
    """
    training = _training_rows(eligible, prediction_season)
    cohort = training[training[cols.SHARE] > 0]
    if cohort.empty:
        raise EmptyCohortError("No vote-getters available to fit the magnitude model")
    logger.info(f"Magnitude cohort: {len(cohort)} vote-getting player-seasons")
    return standardize_by_season(cohort, columns)


def build_indicator_cohort(eligible: pd.DataFrame, columns: Sequence[str],
                           prediction_season: Optional[int] = None) -> pd.DataFrame:
    """
    All eligible player-seasons outside the prediction season, with HAS_VOTE

    Args:
        eligible: Eligible, labelled player-seasons
        columns: Rate columns to standardize
        prediction_season: Season held out of fitting

    Returns:
        pandas.DataFrame: Standardized indicator cohort
    """
    cohort = _training_rows(eligible, prediction_season).copy()
    if cohort.empty:
        raise EmptyCohortError("No player-seasons available to fit the indicator model")
    cohort[cols.HAS_VOTE] = (cohort[cols.SHARE] > 0).astype(int)
    logger.info(f"Indicator cohort: {len(cohort)} player-seasons, "
                f"{int(cohort[cols.HAS_VOTE].sum())} with votes")
    return standardize_by_season(cohort, columns)


def build_prediction_frame(eligible: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """
    Every eligible player-season, each season standardized against itself

    Args:
        eligible: Eligible player-seasons, including the prediction season
        columns: Rate columns to standardize

    Returns:
        pandas.DataFrame: Standardized prediction frame
    """
    return standardize_by_season(eligible, columns)
