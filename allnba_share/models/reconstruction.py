# -*- coding: utf-8 -*-
"""
Share Reconstructor

Combines the two sub-model outputs into an expected share and rescales each
season's predictions toward the league-wide total. Rescaling is a bounded
loop of scale-then-clamp passes: clamping at 1 after each pass means the next
pass sees the clamped sum, so the result is not a single division and only
approaches the target.
"""

import logging
from typing import Dict, Iterable, Optional

import pandas as pd

from ..config import columns as cols
from ..config.model_config import TARGET_TOTAL_SHARE, RESCALE_ITERATIONS
from ..features.labels import normalize_player_name

logger = logging.getLogger(__name__)


def combine_expected_share(predictions: pd.DataFrame) -> pd.DataFrame:
    """
    EXPECTED_SHARE = VOTE_PROB * MAGNITUDE

    Args:
        predictions: Rows with VOTE_PROB and MAGNITUDE

    Returns:
        pandas.DataFrame: Copy with EXPECTED_SHARE
    """
    out = predictions.copy()
    out[cols.EXPECTED_SHARE] = out[cols.VOTE_PROBABILITY] * out[cols.MAGNITUDE]
    return out


def rescale_season_shares(predictions: pd.DataFrame,
                          target_total: float = TARGET_TOTAL_SHARE,
                          iterations: int = RESCALE_ITERATIONS) -> pd.DataFrame:
    """
    Iteratively rescale each season's shares toward target_total

    Each iteration computes factor = target_total / season sum per season,
    multiplies every row's adjusted share by its season's factor and clamps the
    result to [0, 1].

    Args:
        predictions: Rows with SEASON and EXPECTED_SHARE
        target_total: Share total each season should reach
        iterations: Number of scale-then-clamp passes

    Returns:
        pandas.DataFrame: Working copy with ADJUSTED_SHARE
    """
    if iterations < 1:
        raise ValueError(f"iterations must be at least 1, got {iterations}")

    out = predictions.copy()
    out[cols.ADJUSTED_SHARE] = out[cols.EXPECTED_SHARE].astype(float).clip(lower=0.0)

    for _ in range(iterations):
        totals = out.groupby(cols.SEASON)[cols.ADJUSTED_SHARE].transform("sum")
        factor = (target_total / totals.where(totals > 0)).fillna(1.0)
        out[cols.ADJUSTED_SHARE] = (out[cols.ADJUSTED_SHARE] * factor).clip(lower=0.0, upper=1.0)

    empty = out.groupby(cols.SEASON)[cols.ADJUSTED_SHARE].sum()
    for season in empty[empty <= 0].index:
        logger.warning(f"Season {season} has no predicted share to rescale")
    return out


def season_share_residuals(predictions: pd.DataFrame,
                           target_total: float = TARGET_TOTAL_SHARE) -> Dict[int, float]:
    """
    Per-season difference between the adjusted share sum and the target

    Args:
        predictions: Rows with SEASON and ADJUSTED_SHARE
        target_total: Share total each season should reach

    Returns:
        Dict[int, float]: {season: sum - target_total}
    """
    totals = predictions.groupby(cols.SEASON)[cols.ADJUSTED_SHARE].sum()
    return {int(season): float(total - target_total) for season, total in totals.items()}


def report_residuals(predictions: pd.DataFrame, target_total: float = TARGET_TOTAL_SHARE,
                     tolerance: float = 0.05) -> Dict[int, float]:
    """Log seasons whose rescaled total is still further than tolerance from target"""
    residuals = season_share_residuals(predictions, target_total)
    for season, residual in residuals.items():
        if abs(residual) > tolerance:
            logger.warning(f"Season {season} adjusted share total is off target by {residual:+.4f}")
    if residuals:
        worst = max(abs(r) for r in residuals.values())
        logger.info(f"Rescaled {len(residuals)} seasons; largest residual {worst:.4f}")
    return residuals


def team_expected_shares(predictions: pd.DataFrame, season: int,
                         unavailable_keys: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Sum adjusted shares by team for one season, leaving out unavailable players

    Args:
        predictions: Rescaled prediction rows with PLAYER_NAME and TEAM
        season: Season to total
        unavailable_keys: Normalized names of players to leave out

    Returns:
        pandas.DataFrame: TEAM, EXPECTED_SHARE sorted descending
    """
    rows = predictions[predictions[cols.SEASON] == season]
    unavailable_keys = set(unavailable_keys or [])
    if unavailable_keys:
        keys = rows[cols.PLAYER_NAME].map(normalize_player_name)
        excluded = rows[keys.isin(unavailable_keys)]
        for name in excluded[cols.PLAYER_NAME]:
            logger.info(f"Leaving unavailable player {name} out of team totals")
        found = set(keys)
        for key in sorted(unavailable_keys - found):
            logger.warning(f"Unavailable player '{key}' has no prediction in season {season}")
        rows = rows[~keys.isin(unavailable_keys)]

    totals = (
        rows.groupby(cols.TEAM)[cols.ADJUSTED_SHARE]
        .sum()
        .rename(cols.EXPECTED_SHARE)
        .reset_index()
        .sort_values([cols.EXPECTED_SHARE, cols.TEAM], ascending=[False, True])
        .reset_index(drop=True)
    )
    return totals
