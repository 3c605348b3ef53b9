# -*- coding: utf-8 -*-

"""
All-NBA Share Model Runtime Configuration

This module handles directory locations and logging setup for the pipeline.
"""

import sys
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

# Default directory for log files
LOG_DIR = Path.cwd() / "logs"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def config_logging(log_file: Path, verbose: bool = False) -> None:
    """
    Configure logging for the pipeline

    Args:
        log_file: Path to log file
        verbose: Whether to enable verbose logging
    """
    root_logger = logging.getLogger()

    if verbose:
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(logging.INFO)

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(file_handler)

    # Only add stream handler if verbose is True
    if verbose:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(stream_handler)

    # Silence other loggers that might be noisy
    for logger_name in ['matplotlib', 'sklearn', 'joblib']:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # Redirect warnings to logging
    logging.captureWarnings(True)


def initialize_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> Path:
    """
    Initialize the logging system

    Args:
        verbose: Whether to enable verbose logging
        log_dir: Directory for the log file (defaults to LOG_DIR)

    Returns:
        Path: The log file in use
    """
    log_dir = Path(log_dir) if log_dir else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"allnba_share_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    config_logging(log_file, verbose=verbose)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting All-NBA share pipeline at {datetime.now()}")
    logger.info(f"Log file: {log_file}")
    return log_file
