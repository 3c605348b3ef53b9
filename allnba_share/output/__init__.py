# -*- coding: utf-8 -*-
"""
Output Package for the All-NBA Share Model

This package contains modules for saving predictions, tables and models.
"""

from .persistence import (
    save_predictions,
    save_table,
    save_model,
    load_model,
    load_saved_predictions
)

__all__ = [
    'save_predictions',
    'save_table',
    'save_model',
    'load_model',
    'load_saved_predictions'
]
