# -*- coding: utf-8 -*-
"""
Training Package for the All-NBA Share Model

This package contains the end-to-end pipeline orchestration.
"""

from .pipeline import AllNBASharePipeline, PipelineResult, run_from_settings

__all__ = [
    'AllNBASharePipeline',
    'PipelineResult',
    'run_from_settings'
]
