# -*- coding: utf-8 -*-
"""
Utilities Package for the All-NBA Share Model

This package contains settings, errors and logging helpers.
"""

from .settings import PipelineSettings
from .errors import PipelineDataError, MissingColumnsError, LabelJoinError, EmptyCohortError

__all__ = [
    # Settings
    'PipelineSettings',

    # Errors
    'PipelineDataError',
    'MissingColumnsError',
    'LabelJoinError',
    'EmptyCohortError'
]
