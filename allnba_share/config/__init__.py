# -*- coding: utf-8 -*-
"""
Configuration Package for the All-NBA Share Model

This package contains column names, model constants and the default configuration.
"""

from .model_config import (
    TARGET_TOTAL_SHARE,
    RESCALE_ITERATIONS,
    MIN_MINUTES_FRACTION,
    MIN_GAMES_FRACTION,
    SHARE_OFFSET,
    DEFAULT_FEATURE_COLUMNS,
    get_default_config
)

__all__ = [
    # Constants
    'TARGET_TOTAL_SHARE',
    'RESCALE_ITERATIONS',
    'MIN_MINUTES_FRACTION',
    'MIN_GAMES_FRACTION',
    'SHARE_OFFSET',
    'DEFAULT_FEATURE_COLUMNS',

    # Configuration
    'get_default_config'
]
