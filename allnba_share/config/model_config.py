# -*- coding: utf-8 -*-

"""
Model Pipeline Configuration

This module defines configuration settings and constants for the All-NBA share pipeline:
- Participation thresholds for the eligibility filter
- Response transform offset and split seeds for the two sub-models
- League-wide share total and iteration budget for the rescaling loop
- Rotation settings for the playoff experience score

Used by all pipeline components to ensure consistent settings.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from . import columns as cols

logger = logging.getLogger(__name__)

# Total voting share in play each season (5 + 3 + 1 points per ballot, scaled)
TARGET_TOTAL_SHARE = 9.0

# Number of scale-then-clamp passes made by the share reconstructor
RESCALE_ITERATIONS = 10

# Eligibility filter (strict inequalities)
MIN_MINUTES_FRACTION = 0.4
MIN_GAMES_FRACTION = 0.3

# Keeps both sides of the log-odds response strictly positive for shares in [1/500, 1]
SHARE_OFFSET = 0.001

MAGNITUDE_RANDOM_STATE = 42
INDICATOR_RANDOM_STATE = 7
DEFAULT_TEST_SIZE = 0.25

ROTATION_SIZE = 8

DEFAULT_FEATURE_COLUMNS = [
    cols.rate_column(stat)
    for stat in ["PTS", "REB", "AST", "STL", "BLK", "TOV", "FG3M", "FTA"]
] + cols.PARTICIPATION_FEATURES


def _deep_update(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge overrides into base (in place) and return base"""
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def get_default_config(config_path: Optional[str] = None,
                       config: Optional[Dict[str, Any]] = None,
                       season: Optional[int] = None) -> Dict[str, Any]:
    """
    Get default configuration for the share pipeline

    Args:
        config_path: Path to a JSON configuration file merged over the defaults
        config: Configuration dictionary merged last (overrides config_path)
        season: Season to predict (ending year). If None, the latest season in
            the game logs is used.

    Returns:
        Dictionary with configuration settings

    Raises:
        FileNotFoundError: If config_path does not exist
    """
    default_config = {
        'paths': {
            'output_dir': str(Path.cwd() / 'output'),
            'models_dir': str(Path.cwd() / 'models'),
        },
        'features': {
            'min_minutes_fraction': MIN_MINUTES_FRACTION,
            'min_games_fraction': MIN_GAMES_FRACTION,
            'standardize_columns': list(cols.RATE_COLUMNS),
        },
        'labels': {
            'strict': True,
            'check_totals': True,
            'strict_totals': False,
            'total_tolerance': 0.01,
            'require_every_season': True,
        },
        'training': {
            'prediction_season': season,
            'feature_columns': list(DEFAULT_FEATURE_COLUMNS),
            'test_size': DEFAULT_TEST_SIZE,
            'magnitude_random_state': MAGNITUDE_RANDOM_STATE,
            'indicator_random_state': INDICATOR_RANDOM_STATE,
            'indicator_params': {
                'max_iter': 1000,
                'C': 1.0,
            },
            'overfit_margin': 0.1,
        },
        'reconstruction': {
            'target_total': TARGET_TOTAL_SHARE,
            'iterations': RESCALE_ITERATIONS,
            'tolerance': 0.05,
        },
        'experience': {
            'rotation_size': ROTATION_SIZE,
            'min_games_fraction': MIN_GAMES_FRACTION,
        },
    }

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        with open(path, 'r') as f:
            file_config = json.load(f)
        _deep_update(default_config, file_config)
        logger.info(f"Loaded configuration overrides from {config_path}")

    if config:
        _deep_update(default_config, copy.deepcopy(config))

    if season is not None:
        default_config['training']['prediction_season'] = season

    return default_config
