# -*- coding: utf-8 -*-
"""
Settings Module

This module provides the run-level settings for the pipeline, populated from
command-line arguments.
"""

import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class PipelineSettings:
    """
    Class to manage settings for a single pipeline run

    Holds input locations, the season to predict, output options and verbosity.
    """

    def __init__(self, game_logs: Optional[str] = None, voting: Optional[str] = None,
                 season: Optional[int] = None, output_dir: Optional[str] = None):
        """
        Initialize pipeline settings

        Args:
            game_logs: Path to the regular-season player game log CSV
            voting: Path to the historical voting share CSV
            season: Season to predict (uses the latest logged season if None)
            output_dir: Directory for output tables (configuration default if None)
        """
        self.game_logs = game_logs
        self.voting = voting
        self.season = season
        self.output_dir = output_dir
        self.team_games = None
        self.aliases = None
        self.unavailable = None
        self.playoff_logs = None
        self.config_path = None
        self.save_model = False
        self.plot = False
        self.verbose = False

    def update_from_args(self, args):
        """
        Update settings from command line arguments

        Args:
            args: Command line arguments (typically from argparse)
        """
        for name in ('game_logs', 'voting', 'team_games', 'aliases', 'unavailable',
                     'playoff_logs', 'output_dir'):
            value = getattr(args, name, None)
            if value:
                setattr(self, name, value)

        if getattr(args, 'season', None) is not None:
            self.season = int(args.season)

        if getattr(args, 'config', None):
            self.config_path = args.config

        for flag in ('save_model', 'plot', 'verbose'):
            value = getattr(args, flag, None)
            if value is not None:
                setattr(self, flag, bool(value))

        if self.verbose:
            logger.setLevel(logging.DEBUG)
            logger.debug("Verbose mode enabled")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert settings to dictionary

        Returns:
            Dict: Dictionary representation of settings
        """
        return {
            'game_logs': self.game_logs,
            'voting': self.voting,
            'season': self.season,
            'output_dir': self.output_dir,
            'team_games': self.team_games,
            'aliases': self.aliases,
            'unavailable': self.unavailable,
            'playoff_logs': self.playoff_logs,
            'config_path': self.config_path,
            'save_model': self.save_model,
            'plot': self.plot,
            'verbose': self.verbose
        }

    @classmethod
    def from_dict(cls, settings_dict: Dict[str, Any]) -> 'PipelineSettings':
        """
        Create settings object from dictionary

        Args:
            settings_dict: Dictionary with settings

        Returns:
            PipelineSettings: New settings object
        """
        settings = cls()

        for key, value in settings_dict.items():
            if hasattr(settings, key):
                setattr(settings, key, value)

        return settings

    def __str__(self) -> str:
        return (f"PipelineSettings(game_logs={self.game_logs}, voting={self.voting}, "
                f"season={self.season}, output_dir={self.output_dir})")
