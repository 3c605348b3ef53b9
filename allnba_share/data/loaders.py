# -*- coding: utf-8 -*-
"""
Input Loaders

This module reads the flat tabular inputs of the pipeline (player game logs,
voting shares, team game counts, the name alias table and the postseason
availability list) and checks that each carries the columns the pipeline needs.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from ..config import columns as cols
from ..utils.errors import MissingColumnsError, PipelineDataError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_ALIAS_FILE = Path(__file__).resolve().parent / "name_aliases.json"

VOTING_COLUMNS = [cols.LABEL_PLAYER, cols.SEASON, cols.SHARE]
TEAM_GAME_COLUMNS = [cols.TEAM, cols.SEASON, cols.TEAM_GAMES]


def require_columns(df: pd.DataFrame, required: Iterable[str], source: str) -> None:
    """
    Check that a DataFrame carries every required column

    Args:
        df: Table to check
        required: Column names that must be present
        source: Description of the table used in the error message

    Raises:
        MissingColumnsError: If any column is absent
    """
    missing = [c for c in required if c not in df.columns]
    if missing:
        logger.error(f"{source} is missing columns: {missing}")
        raise MissingColumnsError(source, missing)


def coerce_numeric(df: pd.DataFrame, columns: Iterable[str], source: str) -> pd.DataFrame:
    """
    Convert columns to numbers in place; blank cells become 0

    Args:
        df: Table to convert
        columns: Columns that must hold numbers
        source: Description of the table used in the error message

    Returns:
        pandas.DataFrame: The same table

    Raises:
        PipelineDataError: If a non-blank cell cannot be parsed as a number
    """
    for column in columns:
        parsed = pd.to_numeric(df[column], errors="coerce")
        bad = parsed.isna() & df[column].notna()
        if bad.any():
            row = bad[bad].index[0]
            logger.error(f"{source} has {int(bad.sum())} non-numeric {column} values")
            raise PipelineDataError(
                f"{source}: non-numeric {column} value {df.at[row, column]!r} in row {row}"
            )
        df[column] = parsed.fillna(0.0)
    return df


def _read_csv(path: PathLike) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return pd.read_csv(path)


def load_game_logs(path: PathLike) -> pd.DataFrame:
    """
    Load player game logs (one row per player per game)

    Args:
        path: CSV file with the game log columns

    Returns:
        pandas.DataFrame: Game logs with parsed dates and numeric stats
    """
    logs = _read_csv(path)
    require_columns(logs, cols.GAME_LOG_COLUMNS, f"Game log file {path}")

    logs[cols.GAME_DATE] = pd.to_datetime(logs[cols.GAME_DATE])
    numeric = [cols.MINUTES] + cols.COUNTING_STATS
    coerce_numeric(logs, numeric, f"Game log file {path}")
    logs[cols.SEASON] = logs[cols.SEASON].astype(int)

    logger.info(f"Loaded {len(logs)} game log rows covering seasons "
                f"{sorted(logs[cols.SEASON].unique().tolist())} from {path}")
    return logs


def load_playoff_logs(path: PathLike) -> pd.DataFrame:
    """
    Load playoff game logs (same layout as the regular-season logs, minutes only required)

    Args:
        path: CSV file of playoff player game logs

    Returns:
        pandas.DataFrame: Playoff game logs
    """
    logs = _read_csv(path)
    require_columns(logs, [cols.PLAYER_ID, cols.SEASON, cols.MINUTES], f"Playoff log file {path}")
    coerce_numeric(logs, [cols.MINUTES], f"Playoff log file {path}")
    logs[cols.SEASON] = logs[cols.SEASON].astype(int)
    logger.info(f"Loaded {len(logs)} playoff game log rows from {path}")
    return logs


def load_voting_shares(path: PathLike) -> pd.DataFrame:
    """
    Load historical voting shares

    Args:
        path: CSV file with PLAYER, SEASON and SHARE columns

    Returns:
        pandas.DataFrame: Voting labels

    Raises:
        PipelineDataError: If a share lies outside [0, 1]
    """
    labels = _read_csv(path)
    require_columns(labels, VOTING_COLUMNS, f"Voting share file {path}")
    labels[cols.SEASON] = labels[cols.SEASON].astype(int)
    labels[cols.SHARE] = pd.to_numeric(labels[cols.SHARE], errors="coerce")

    bad = labels[labels[cols.SHARE].isna() | (labels[cols.SHARE] < 0) | (labels[cols.SHARE] > 1)]
    if not bad.empty:
        first = bad.iloc[0]
        raise PipelineDataError(
            f"{len(bad)} voting rows have a share outside [0, 1], e.g. "
            f"{first[cols.LABEL_PLAYER]} ({first[cols.SEASON]}): {first[cols.SHARE]}"
        )

    logger.info(f"Loaded {len(labels)} voting share rows from {path}")
    return labels


def load_team_game_counts(path: PathLike) -> pd.DataFrame:
    """
    Load precomputed team-season game counts

    Args:
        path: CSV file with TEAM, SEASON and TEAM_GAMES columns

    Returns:
        pandas.DataFrame: Team game counts
    """
    counts = _read_csv(path)
    require_columns(counts, TEAM_GAME_COLUMNS, f"Team game count file {path}")
    counts[cols.SEASON] = counts[cols.SEASON].astype(int)
    return counts[TEAM_GAME_COLUMNS]


def compute_team_game_counts(logs: pd.DataFrame) -> pd.DataFrame:
    """
    Count distinct games played by each team in each season

    Args:
        logs: Player game logs

    Returns:
        pandas.DataFrame: TEAM, SEASON, TEAM_GAMES
    """
    counts = (
        logs.groupby([cols.TEAM, cols.SEASON])[cols.GAME_ID]
        .nunique()
        .rename(cols.TEAM_GAMES)
        .reset_index()
    )
    return counts


def load_alias_table(path: Optional[PathLike] = None) -> Dict[str, str]:
    """
    Load the mapping from voting-source player names to game-log player names

    Args:
        path: JSON object file of {external name: game log name}. Defaults to
            the alias table shipped with the package.

    Returns:
        Dict[str, str]: Alias mapping
    """
    path = Path(path) if path else DEFAULT_ALIAS_FILE
    if not path.exists():
        raise FileNotFoundError(f"Alias table not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        aliases = json.load(f)

    if not isinstance(aliases, dict):
        raise PipelineDataError(f"Alias table {path} must be a JSON object of name pairs")

    logger.info(f"Loaded {len(aliases)} player name aliases from {path}")
    return {str(k): str(v) for k, v in aliases.items()}


def load_unavailable_players(path: Optional[PathLike]) -> List[str]:
    """
    Load the names of players unavailable for the postseason

    Args:
        path: Text file, one player name per line; blank lines and lines
            starting with '#' are ignored. None means nobody is unavailable.

    Returns:
        List[str]: Player names
    """
    if path is None:
        return []
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Unavailable player list not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        names = [line.strip() for line in f]
    names = [name for name in names if name and not name.startswith("#")]

    logger.info(f"Loaded {len(names)} unavailable players from {path}")
    return names
