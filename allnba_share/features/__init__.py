# -*- coding: utf-8 -*-

"""
Features Package for the All-NBA Share Model

This package contains the player-season feature builder, the voting label
joiner, the season standardizer and the playoff experience score.
"""

from .player_features import build_player_seasons, filter_eligible
from .labels import normalize_player_name, join_voting_labels
from .standardization import (
    compute_season_statistics,
    apply_season_statistics,
    standardize_by_season,
    build_magnitude_cohort,
    build_indicator_cohort,
    build_prediction_frame
)
from .experience import select_rotation, compute_playoff_experience

__all__ = [
    # Player seasons
    'build_player_seasons',
    'filter_eligible',

    # Labels
    'normalize_player_name',
    'join_voting_labels',

    # Standardization
    'compute_season_statistics',
    'apply_season_statistics',
    'standardize_by_season',
    'build_magnitude_cohort',
    'build_indicator_cohort',
    'build_prediction_frame',

    # Playoff experience
    'select_rotation',
    'compute_playoff_experience'
]
