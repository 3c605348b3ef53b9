# -*- coding: utf-8 -*-
"""
Data Validation Module

This module provides checks on the invariants of the voting labels and the
player-season feature table before they are used for model fitting.
"""

import logging
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from ..config import columns as cols
from ..config.model_config import TARGET_TOTAL_SHARE
from ..utils.errors import PipelineDataError

logger = logging.getLogger(__name__)


def validate_label_totals(labels: pd.DataFrame, target: float = TARGET_TOTAL_SHARE,
                          tolerance: float = 0.01, strict: bool = False) -> Dict[int, float]:
    """
    Check that each season's voting shares sum to the league-wide total

    Args:
        labels: Voting labels with SEASON and SHARE columns
        target: Expected per-season total
        tolerance: Allowed absolute deviation
        strict: Raise instead of logging when a season deviates

    Returns:
        Dict[int, float]: Seasons whose total deviates, mapped to their total

    Raises:
        PipelineDataError: If strict and any season deviates
    """
    totals = labels.groupby(cols.SEASON)[cols.SHARE].sum()
    off = totals[(totals - target).abs() > tolerance]

    for season, total in off.items():
        logger.warning(f"Voting shares for season {season} sum to {total:.3f}, expected {target}")

    if strict and not off.empty:
        raise PipelineDataError(
            f"Voting share totals deviate from {target} in seasons {off.index.tolist()}"
        )

    return {int(season): float(total) for season, total in off.items()}


def validate_player_seasons(df: pd.DataFrame) -> None:
    """
    Check the player-season invariants: fractions in [0, 1], non-negative
    rates and shares in [0, 1]

    Args:
        df: Player-season table with participation, rate and share columns

    Raises:
        PipelineDataError: Naming the first offending player-season
    """
    checks = []
    for column in (cols.MINUTES_FRACTION, cols.GAMES_FRACTION, cols.WIN_PCT, cols.SHARE):
        if column in df.columns:
            checks.append((column, (df[column] < 0) | (df[column] > 1)))
    for column in cols.RATE_COLUMNS:
        if column in df.columns:
            checks.append((column, (df[column] < 0) | ~np.isfinite(df[column])))

    for column, mask in checks:
        if mask.any():
            row = df[mask].iloc[0]
            logger.error(f"{int(mask.sum())} player-seasons have invalid {column}")
            raise PipelineDataError(
                f"Invalid {column}={row[column]} for player {row[cols.PLAYER_ID]} "
                f"in season {row[cols.SEASON]}"
            )


def find_unlabelled_seasons(seasons: Iterable[int], labels: pd.DataFrame,
                            strict: bool = True) -> List[int]:
    """
    Find training seasons with no voting rows at all

    A season missing from the voting table would otherwise be fit as a season
    in which nobody received a vote.

    Args:
        seasons: Seasons used for fitting
        labels: Voting labels with a SEASON column
        strict: Raise instead of logging when a season has no labels

    Returns:
        List[int]: Seasons without voting rows

    Raises:
        PipelineDataError: If strict and any season has no voting rows
    """
    labelled = set(labels[cols.SEASON].astype(int))
    missing = sorted(int(season) for season in set(seasons) if int(season) not in labelled)
    if missing:
        logger.error(f"No voting rows for training seasons {missing}")
        if strict:
            raise PipelineDataError(
                f"No voting rows for training seasons {missing}; supply their labels "
                f"or set labels.require_every_season to false to leave them out of fitting"
            )
    return missing
