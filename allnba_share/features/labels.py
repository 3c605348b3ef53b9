# -*- coding: utf-8 -*-
"""
Voting Label Joiner

This module attaches external voting-share labels to the player-season table.
Names from the voting source are cleaned of decorative markers, mapped through
the alias table and accent-folded; the same folding is applied to game-log
names so both sides meet on a common key.
"""

import logging
import re
import unicodedata
from typing import Dict, Iterable, Optional, Set

import pandas as pd

from ..config import columns as cols
from ..data.loaders import require_columns
from ..utils.errors import LabelJoinError

logger = logging.getLogger(__name__)

# Asterisks (Hall of Fame), daggers and similar trailing markers
_MARKER_PATTERN = re.compile(r"[\*†‡]+")
_SPACE_PATTERN = re.compile(r"\s+")


def fold_accents(name: str) -> str:
    """Strip diacritics, e.g. 'Jokić' -> 'Jokic'"""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def strip_markers(name: str) -> str:
    return _SPACE_PATTERN.sub(" ", _MARKER_PATTERN.sub("", str(name))).strip()


def normalize_player_name(name: str, aliases: Optional[Dict[str, str]] = None) -> str:
    """
    Build the join key for a player name

    Args:
        name: Raw player name from either source
        aliases: Mapping of external names to game-log names

    Returns:
        str: Lower-case, accent-folded name with markers removed
    """
    cleaned = strip_markers(name)
    if aliases:
        cleaned = aliases.get(cleaned, cleaned)
    folded = fold_accents(cleaned).replace(".", "")
    return _SPACE_PATTERN.sub(" ", folded).strip().casefold()


def join_voting_labels(seasons: pd.DataFrame, labels: pd.DataFrame,
                       aliases: Optional[Dict[str, str]] = None,
                       strict: bool = True) -> pd.DataFrame:
    """
    Attach voting shares to player-seasons by (normalized name, season)

    Player-seasons absent from the voting table receive a share of 0.

    Args:
        seasons: Player-season feature table
        labels: Voting labels (PLAYER, SEASON, SHARE)
        aliases: Name alias table
        strict: Raise on unmatched labels instead of logging them

    Returns:
        pandas.DataFrame: Copy of seasons with SHARE and HAS_VOTE columns

    Raises:
        LabelJoinError: On duplicate or ambiguous keys, or (if strict) on
            label rows that match no player-season
    """
    require_columns(labels, [cols.LABEL_PLAYER, cols.SEASON, cols.SHARE], "Voting labels")

    keyed_labels = labels[[cols.LABEL_PLAYER, cols.SEASON, cols.SHARE]].copy()
    keyed_labels[cols.NAME_KEY] = keyed_labels[cols.LABEL_PLAYER].map(
        lambda n: normalize_player_name(n, aliases)
    )
    duplicated = keyed_labels.duplicated([cols.NAME_KEY, cols.SEASON], keep=False)
    if duplicated.any():
        dupes = keyed_labels[duplicated][[cols.LABEL_PLAYER, cols.SEASON]].values.tolist()
        raise LabelJoinError(f"Duplicate voting rows after name normalization: {dupes}")

    out = seasons.copy()
    out[cols.NAME_KEY] = out[cols.PLAYER_NAME].map(normalize_player_name)

    feature_keys = out[[cols.NAME_KEY, cols.SEASON, cols.PLAYER_ID]]
    collisions = feature_keys.groupby([cols.NAME_KEY, cols.SEASON])[cols.PLAYER_ID].nunique()
    collisions = collisions[collisions > 1]
    if not collisions.empty:
        labelled_keys = set(zip(keyed_labels[cols.NAME_KEY], keyed_labels[cols.SEASON]))
        ambiguous = [key for key in collisions.index if key in labelled_keys]
        if ambiguous:
            raise LabelJoinError(f"Voting rows match more than one player: {ambiguous}")

    matched_keys: Set = set(zip(out[cols.NAME_KEY], out[cols.SEASON]))
    unmatched = keyed_labels[[
        (key, season) not in matched_keys
        for key, season in zip(keyed_labels[cols.NAME_KEY], keyed_labels[cols.SEASON])
    ]]
    if not unmatched.empty:
        missing = unmatched[[cols.LABEL_PLAYER, cols.SEASON]].values.tolist()
        logger.error(f"{len(missing)} voting rows match no player-season: {missing}")
        if strict:
            raise LabelJoinError(
                f"{len(missing)} voting rows match no player-season; extend the alias table: {missing}"
            )

    out = out.merge(
        keyed_labels[[cols.NAME_KEY, cols.SEASON, cols.SHARE]],
        on=[cols.NAME_KEY, cols.SEASON],
        how="left",
    )
    out[cols.SHARE] = out[cols.SHARE].fillna(0.0)
    out[cols.HAS_VOTE] = (out[cols.SHARE] > 0).astype(int)

    logger.info(f"Joined {len(labels) - len(unmatched)} of {len(labels)} voting rows; "
                f"{int(out[cols.HAS_VOTE].sum())} player-seasons received votes")
    return out


def unavailable_name_keys(names: Iterable[str],
                          aliases: Optional[Dict[str, str]] = None) -> Set[str]:
    """Normalized join keys for a list of player names"""
    return {normalize_player_name(name, aliases) for name in names}
