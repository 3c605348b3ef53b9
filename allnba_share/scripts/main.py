#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
All-NBA Share Model - Main Module

Entry point for the offline batch run: fits the two-stage voting share model on
historical seasons, predicts the target season and writes player predictions,
team expected-share totals and (optionally) playoff experience scores.

Usage:
    python -m allnba_share.scripts.main --game-logs logs.csv --voting shares.csv
"""

import sys
import argparse
import logging

from ..utils.config import initialize_logging
from ..utils.errors import PipelineDataError
from ..utils.settings import PipelineSettings
from ..training.pipeline import run_from_settings

logger = logging.getLogger(__name__)


def parse_arguments(argv=None):
    """
    Parse command-line arguments

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(description="All-NBA voting share model")
    parser.add_argument("--game-logs", required=True,
                        help="CSV of regular-season player game logs")
    parser.add_argument("--voting", required=True,
                        help="CSV of historical voting shares (PLAYER, SEASON, SHARE)")
    parser.add_argument("--team-games",
                        help="CSV of team-season game counts (derived from the logs if omitted)")
    parser.add_argument("--aliases",
                        help="JSON name alias table (defaults to the packaged table)")
    parser.add_argument("--unavailable",
                        help="Text file of players unavailable for the postseason, one per line")
    parser.add_argument("--playoff-logs",
                        help="CSV of playoff player game logs for the experience score")
    parser.add_argument("--season", type=int,
                        help="Season to predict (ending year). Defaults to the latest logged season.")
    parser.add_argument("--config", help="JSON file of configuration overrides")
    parser.add_argument("--output-dir",
                        help="Directory for output tables (defaults to paths.output_dir of the configuration)")
    parser.add_argument("--save-model", action="store_true", help="Save the fitted model with joblib")
    parser.add_argument("--plot", action="store_true", help="Save a magnitude model fit plot")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    return parser.parse_args(argv)


def main(argv=None):
    """
    Main function to run the pipeline

    Returns:
        int: Process exit status
    """
    args = parse_arguments(argv)

    initialize_logging(args.verbose)

    settings = PipelineSettings()
    settings.update_from_args(args)
    logger.info(f"Running with {settings}")

    try:
        result = run_from_settings(settings)
    except PipelineDataError as e:
        logger.error(f"Pipeline aborted: {str(e)}")
        return 1

    print(f"Team expected All-NBA share, season {result.prediction_season}:")
    print(result.team_shares.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
