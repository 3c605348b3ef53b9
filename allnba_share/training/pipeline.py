# -*- coding: utf-8 -*-

"""
All-NBA Share Pipeline Module

This module runs the full offline batch: player-season features from game logs,
voting labels, per-season standardization, the two-stage model, iterative share
rescaling, team totals and (optionally) playoff experience.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from ..config import columns as cols
from ..config.model_config import get_default_config
from ..data.loaders import (
    load_game_logs,
    load_voting_shares,
    load_team_game_counts,
    load_alias_table,
    load_unavailable_players,
    load_playoff_logs,
)
from ..data.validation import validate_label_totals, validate_player_seasons, find_unlabelled_seasons
from ..features.player_features import build_player_seasons, filter_eligible
from ..features.labels import join_voting_labels, unavailable_name_keys
from ..features.standardization import (
    build_magnitude_cohort,
    build_indicator_cohort,
    build_prediction_frame,
)
from ..features.experience import compute_playoff_experience
from ..models.share_model import TwoStageShareModel, TrainingSplit, fit_two_stage_model, MAGNITUDE
from ..models.reconstruction import rescale_season_shares, report_residuals, team_expected_shares
from ..models.evaluation import plot_magnitude_fit
from ..output.persistence import save_predictions, save_table, save_model
from ..utils.errors import EmptyCohortError
from ..utils.settings import PipelineSettings

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything produced by one pipeline run"""
    prediction_season: int
    player_seasons: pd.DataFrame
    model: TwoStageShareModel
    predictions: pd.DataFrame
    team_shares: pd.DataFrame
    residuals: Dict[int, float]
    splits: Dict[str, TrainingSplit] = field(default_factory=dict)
    experience: Optional[pd.DataFrame] = None


class AllNBASharePipeline:
    """Offline batch pipeline from game logs and voting records to predicted shares"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the pipeline

        Args:
            config: Full configuration dictionary (defaults from get_default_config)
        """
        self.config = config or get_default_config()
        logger.info(f"Initialized All-NBA share pipeline with "
                    f"{len(self.config['training']['feature_columns'])} predictors")

    def build_features(self, logs: pd.DataFrame,
                       team_games: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        """
        Build the unfiltered player-season table

        Args:
            logs: Player game logs
            team_games: Optional precomputed team game counts

        Returns:
            pandas.DataFrame: Player-season features
        """
        return build_player_seasons(logs, team_games)

    def attach_labels(self, seasons: pd.DataFrame, labels: pd.DataFrame,
                      aliases: Optional[Dict[str, str]] = None) -> pd.DataFrame:
        """
        Join voting shares onto player-seasons and check label invariants

        Args:
            seasons: Player-season features
            labels: Voting labels
            aliases: Name alias table

        Returns:
            pandas.DataFrame: Labelled player-seasons
        """
        label_config = self.config['labels']
        if label_config.get('check_totals', True):
            validate_label_totals(
                labels,
                target=self.config['reconstruction']['target_total'],
                tolerance=label_config.get('total_tolerance', 0.01),
                strict=label_config.get('strict_totals', False),
            )

        labelled = join_voting_labels(seasons, labels, aliases=aliases,
                                      strict=label_config.get('strict', True))
        validate_player_seasons(labelled)
        return labelled

    def resolve_prediction_season(self, seasons: pd.DataFrame) -> int:
        """The configured prediction season, or the latest season in the table"""
        season = self.config['training'].get('prediction_season')
        if season is None:
            season = int(seasons[cols.SEASON].max())
            logger.info(f"No prediction season configured; using latest season {season}")
        return int(season)

    def eligible_rows(self, labelled: pd.DataFrame) -> pd.DataFrame:
        feature_config = self.config['features']
        return filter_eligible(
            labelled,
            min_minutes_fraction=feature_config['min_minutes_fraction'],
            min_games_fraction=feature_config['min_games_fraction'],
        )

    def training_rows(self, eligible: pd.DataFrame, labels: pd.DataFrame,
                      prediction_season: int) -> pd.DataFrame:
        """
        Eligible rows usable for fitting, after checking the prediction season

        Args:
            eligible: Eligible, labelled player-seasons of every season
            labels: Voting labels
            prediction_season: Season held out of fitting

        Returns:
            pandas.DataFrame: Eligible rows without unlabelled training seasons

        Raises:
            EmptyCohortError: If the prediction season has no eligible rows
            PipelineDataError: If a training season has no voting rows and
                labels.require_every_season is set
        """
        if not (eligible[cols.SEASON] == prediction_season).any():
            raise EmptyCohortError(f"No eligible player-seasons in prediction season {prediction_season}")

        training_seasons = set(eligible[cols.SEASON]) - {prediction_season}
        unlabelled = find_unlabelled_seasons(
            training_seasons, labels,
            strict=self.config['labels'].get('require_every_season', True),
        )
        if unlabelled:
            logger.warning(f"Leaving unlabelled seasons {unlabelled} out of fitting")
            return eligible[~eligible[cols.SEASON].isin(unlabelled)]
        return eligible

    def fit(self, eligible: pd.DataFrame, prediction_season: Optional[int] = None):
        """
        Fit both sub-models on seasons other than the prediction season

        Args:
            eligible: Eligible, labelled player-seasons
            prediction_season: Season excluded from fitting

        Returns:
            Tuple of the fitted TwoStageShareModel and its training splits
        """
        columns = self.config['features']['standardize_columns']
        magnitude_cohort = build_magnitude_cohort(eligible, columns, prediction_season)
        indicator_cohort = build_indicator_cohort(eligible, columns, prediction_season)
        return fit_two_stage_model(
            magnitude_cohort,
            indicator_cohort,
            self.config['training']['feature_columns'],
            self.config['training'],
        )

    def predict(self, model: TwoStageShareModel, eligible: pd.DataFrame) -> pd.DataFrame:
        """
        Predict and rescale shares for every eligible player-season

        Args:
            model: Fitted two-stage model
            eligible: Eligible player-seasons of every season

        Returns:
            pandas.DataFrame: Prediction rows with ADJUSTED_SHARE
        """
        frame = build_prediction_frame(eligible, self.config['features']['standardize_columns'])
        raw = model.predict(frame)

        recon = self.config['reconstruction']
        return rescale_season_shares(raw, target_total=recon['target_total'],
                                     iterations=recon['iterations'])

    def run(self, logs: pd.DataFrame, labels: pd.DataFrame,
            team_games: Optional[pd.DataFrame] = None,
            aliases: Optional[Dict[str, str]] = None,
            unavailable: Optional[Iterable[str]] = None,
            playoff_logs: Optional[pd.DataFrame] = None) -> PipelineResult:
        """
        Run the whole pipeline on in-memory tables

        Args:
            logs: Regular-season player game logs
            labels: Historical voting labels
            team_games: Optional precomputed team game counts
            aliases: Name alias table
            unavailable: Names of players unavailable for the postseason
            playoff_logs: Optional playoff game logs for the experience score

        Returns:
            PipelineResult: All run outputs
        """
        seasons = self.build_features(logs, team_games)
        labelled = self.attach_labels(seasons, labels, aliases)
        prediction_season = self.resolve_prediction_season(labelled)

        eligible = self.eligible_rows(labelled)
        training = self.training_rows(eligible, labels, prediction_season)
        model, splits = self.fit(training, prediction_season)
        predictions = self.predict(model, eligible)

        recon = self.config['reconstruction']
        residuals = report_residuals(predictions, recon['target_total'], recon.get('tolerance', 0.05))

        team_shares = team_expected_shares(
            predictions, prediction_season, unavailable_name_keys(unavailable or [], aliases)
        )

        experience = None
        if playoff_logs is not None:
            exp_config = self.config['experience']
            experience = compute_playoff_experience(
                logs, playoff_logs, prediction_season,
                rotation_size=exp_config['rotation_size'],
                min_games_fraction=exp_config['min_games_fraction'],
            )

        logger.info(f"Pipeline complete: {len(predictions)} player-season predictions, "
                    f"{len(team_shares)} teams in season {prediction_season}")
        return PipelineResult(
            prediction_season=prediction_season,
            player_seasons=labelled,
            model=model,
            predictions=predictions,
            team_shares=team_shares,
            residuals=residuals,
            splits=splits,
            experience=experience,
        )


def run_from_settings(settings: PipelineSettings) -> PipelineResult:
    """
    Load inputs named in settings, run the pipeline and write its outputs

    Args:
        settings: Run settings (input paths, season, output options)

    Returns:
        PipelineResult: All run outputs
    """
    if not settings.game_logs or not settings.voting:
        raise ValueError("Both game logs and voting share files are required")

    config = get_default_config(settings.config_path, season=settings.season)

    logs = load_game_logs(settings.game_logs)
    labels = load_voting_shares(settings.voting)
    team_games = load_team_game_counts(settings.team_games) if settings.team_games else None
    aliases = load_alias_table(settings.aliases)
    unavailable = load_unavailable_players(settings.unavailable)
    playoff_logs = load_playoff_logs(settings.playoff_logs) if settings.playoff_logs else None

    result = AllNBASharePipeline(config).run(
        logs, labels, team_games=team_games, aliases=aliases,
        unavailable=unavailable, playoff_logs=playoff_logs,
    )

    output_dir = settings.output_dir or config['paths']['output_dir']
    season = result.prediction_season
    save_predictions(result.predictions, output_dir=output_dir, season=season)
    save_table(result.team_shares, output_dir=output_dir,
               filename=f"team_expected_share_{season}.csv")
    if result.experience is not None:
        save_table(result.experience, output_dir=output_dir,
                   filename=f"playoff_experience_{season}.csv")

    if settings.save_model:
        save_model(result.model, output_dir=config['paths']['models_dir'],
                   metadata={'prediction_season': season,
                             'magnitude_random_state': config['training']['magnitude_random_state'],
                             'indicator_random_state': config['training']['indicator_random_state']})

    if settings.plot:
        plot_magnitude_fit(result.model.magnitude, result.splits[MAGNITUDE],
                           Path(output_dir) / f"magnitude_fit_{season}.png")

    return result
