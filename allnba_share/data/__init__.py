# -*- coding: utf-8 -*-
"""
Data Package for the All-NBA Share Model

This package contains the input loaders and data validation checks.
"""

from .loaders import (
    load_game_logs,
    load_playoff_logs,
    load_voting_shares,
    load_team_game_counts,
    compute_team_game_counts,
    load_alias_table,
    load_unavailable_players,
    require_columns
)

from .validation import validate_label_totals, validate_player_seasons, find_unlabelled_seasons

__all__ = [
    # Loaders
    'load_game_logs',
    'load_playoff_logs',
    'load_voting_shares',
    'load_team_game_counts',
    'compute_team_game_counts',
    'load_alias_table',
    'load_unavailable_players',
    'require_columns',

    # Validation
    'validate_label_totals',
    'validate_player_seasons',
    'find_unlabelled_seasons'
]
