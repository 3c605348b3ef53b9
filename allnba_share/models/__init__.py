# -*- coding: utf-8 -*-
"""
Models Package for the All-NBA Share Model

This package contains the two-stage share model, its evaluation and the share
reconstructor.
"""

from .share_model import (
    FittedModel,
    TrainingSplit,
    TwoStageShareModel,
    transform_share,
    inverse_transform_share,
    split_training_rows,
    fit_magnitude_model,
    fit_indicator_model,
    fit_two_stage_model
)
from .reconstruction import (
    combine_expected_share,
    rescale_season_shares,
    season_share_residuals,
    team_expected_shares
)

__all__ = [
    # Two-stage model
    'FittedModel',
    'TrainingSplit',
    'TwoStageShareModel',
    'transform_share',
    'inverse_transform_share',
    'split_training_rows',
    'fit_magnitude_model',
    'fit_indicator_model',
    'fit_two_stage_model',

    # Reconstruction
    'combine_expected_share',
    'rescale_season_shares',
    'season_share_residuals',
    'team_expected_shares'
]
