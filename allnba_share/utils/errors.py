# -*- coding: utf-8 -*-
"""
Pipeline Errors

Exceptions raised when input data cannot support a run.
"""

from typing import Iterable


class PipelineDataError(ValueError):
    """Exception raised when input data violates a pipeline invariant"""
    pass


class MissingColumnsError(PipelineDataError):
    """Exception raised when a table lacks required columns"""

    def __init__(self, source: str, missing: Iterable[str]):
        self.source = source
        self.missing = sorted(missing)
        super().__init__(f"{source} is missing required columns: {', '.join(self.missing)}")


class LabelJoinError(PipelineDataError):
    """Exception raised when voting labels cannot be matched to player seasons"""
    pass


class EmptyCohortError(PipelineDataError):
    """Exception raised when a training cohort has no rows"""
    pass
