# -*- coding: utf-8 -*-

"""
Two-Stage Voting Share Model

The expected voting share of a player-season is modelled in two parts:
- an indicator sub-model (logistic regression) for the probability of
  receiving any vote at all, fit on every eligible player-season
- a magnitude sub-model (linear regression) for the share a vote-getter
  receives, fit on a log-odds transform of the share

Each sub-model is fit on its own seeded train/test partition and returned as
an immutable FittedModel that remembers the exact predictor columns it uses.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression, LogisticRegression
from sklearn.model_selection import train_test_split

from ..config import columns as cols
from ..config.model_config import (
    SHARE_OFFSET,
    DEFAULT_TEST_SIZE,
    MAGNITUDE_RANDOM_STATE,
    INDICATOR_RANDOM_STATE,
)
from ..utils.errors import EmptyCohortError, PipelineDataError
from .evaluation import evaluate_magnitude_model, evaluate_indicator_model, check_overfitting
from .reconstruction import combine_expected_share

logger = logging.getLogger(__name__)

MAGNITUDE = "magnitude"
INDICATOR = "indicator"


def transform_share(share) -> np.ndarray:
    """
    Map shares onto the real line: ln((S - 0.001) / (1.001 - S))

    Args:
        share: Scalar or array of shares in (0.001, 1.001)

    Returns:
        numpy.ndarray: Transformed response

    Raises:
        ValueError: If any share lies outside the open interval
    """
    share = np.asarray(share, dtype=float)
    if np.any(share <= SHARE_OFFSET) or np.any(share >= 1.0 + SHARE_OFFSET):
        raise ValueError(f"Shares must lie strictly between {SHARE_OFFSET} and {1.0 + SHARE_OFFSET}")
    return np.log((share - SHARE_OFFSET) / (1.0 + SHARE_OFFSET - share))


def inverse_transform_share(values) -> np.ndarray:
    """
    Map model output back into (0, 1): exp(y) / (1 + exp(y))

    Args:
        values: Scalar or array of real-valued predictions

    Returns:
        numpy.ndarray: Shares in (0, 1)
    """
    values = np.asarray(values, dtype=float)
    # Same function as exp(y) / (1 + exp(y)), without overflow for large y
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-values))


@dataclass(frozen=True)
class TrainingSplit:
    """Disjoint train and held-out partitions of one cohort"""
    train: pd.DataFrame
    test: pd.DataFrame
    random_state: int

    def __len__(self) -> int:
        return len(self.train) + len(self.test)


def split_training_rows(cohort: pd.DataFrame, test_size: float = DEFAULT_TEST_SIZE,
                        random_state: int = MAGNITUDE_RANDOM_STATE,
                        stratify_column: Optional[str] = None) -> TrainingSplit:
    """
    Partition a cohort once, with a fixed seed, into train and test rows

    Args:
        cohort: Rows to split
        test_size: Fraction held out
        random_state: Seed for the partition
        stratify_column: Optional column whose class balance is preserved

    Returns:
        TrainingSplit: Disjoint partitions covering every row once
    """
    if len(cohort) < 2:
        raise EmptyCohortError(f"Need at least 2 rows to split, got {len(cohort)}")

    stratify = None
    if stratify_column is not None:
        counts = cohort[stratify_column].value_counts()
        if len(counts) > 1 and counts.min() >= 2:
            stratify = cohort[stratify_column]
        else:
            logger.warning(f"Cannot stratify on {stratify_column} (class counts {counts.to_dict()}); "
                           f"using an unstratified split")

    train, test = train_test_split(cohort, test_size=test_size,
                                   random_state=random_state, stratify=stratify)
    logger.info(f"Random split: train={len(train)}, test={len(test)}")
    return TrainingSplit(train=train, test=test, random_state=random_state)


@dataclass(frozen=True)
class FittedModel:
    """
    A fitted sub-model and the predictor columns it was fit on

    Identity columns are never predictors; they stay on the rows passed to
    predict so every output is traceable to a player-season.
    """
    kind: str
    estimator: Any
    feature_columns: Tuple[str, ...]
    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def coefficients(self) -> pd.Series:
        return pd.Series(np.ravel(self.estimator.coef_), index=list(self.feature_columns))

    @property
    def intercept(self) -> float:
        return float(np.ravel(self.estimator.intercept_)[0])

    def design_matrix(self, df: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in self.feature_columns if c not in df.columns]
        if missing:
            raise ValueError(f"{self.kind} model is missing predictor columns: {missing}")
        return df[list(self.feature_columns)].astype(float)

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        """
        Predict for every row of df

        Returns:
            numpy.ndarray: Vote probabilities for the indicator model, shares
            in (0, 1) for the magnitude model
        """
        X = self.design_matrix(df)
        if self.kind == INDICATOR:
            return self.estimator.predict_proba(X)[:, 1]
        return inverse_transform_share(self.estimator.predict(X))


def fit_magnitude_model(cohort: pd.DataFrame, feature_columns: Sequence[str],
                        test_size: float = DEFAULT_TEST_SIZE,
                        random_state: int = MAGNITUDE_RANDOM_STATE) -> Tuple[FittedModel, TrainingSplit]:
    """
    Fit the linear regression of transformed share on the training partition

    Args:
        cohort: Standardized vote-getter rows (SHARE > 0)
        feature_columns: Predictor columns
        test_size: Fraction held out for evaluation
        random_state: Seed for the partition

    Returns:
        Tuple[FittedModel, TrainingSplit]: Model and the partition it was fit on
    """
    if (cohort[cols.SHARE] <= 0).any():
        raise PipelineDataError("Magnitude cohort must contain only rows with a positive share")

    split = split_training_rows(cohort, test_size=test_size, random_state=random_state)
    X = split.train[list(feature_columns)].astype(float)
    y = transform_share(split.train[cols.SHARE])

    estimator = LinearRegression()
    estimator.fit(X, y)

    model = FittedModel(kind=MAGNITUDE, estimator=estimator, feature_columns=tuple(feature_columns))
    logger.info(f"Fit magnitude model on {len(split.train)} rows with {len(feature_columns)} predictors")
    return model, split


def fit_indicator_model(cohort: pd.DataFrame, feature_columns: Sequence[str],
                        test_size: float = DEFAULT_TEST_SIZE,
                        random_state: int = INDICATOR_RANDOM_STATE,
                        params: Optional[Dict[str, Any]] = None) -> Tuple[FittedModel, TrainingSplit]:
    """
    Fit the logistic regression of HAS_VOTE on the training partition

    Args:
        cohort: Standardized rows of vote-getters and non-vote-getters
        feature_columns: Predictor columns
        test_size: Fraction held out for evaluation
        random_state: Seed for the partition
        params: Extra LogisticRegression keyword arguments

    Returns:
        Tuple[FittedModel, TrainingSplit]: Model and the partition it was fit on
    """
    split = split_training_rows(cohort, test_size=test_size, random_state=random_state,
                                stratify_column=cols.HAS_VOTE)
    y = split.train[cols.HAS_VOTE].astype(int)
    if y.nunique() < 2:
        raise PipelineDataError("Indicator training partition contains a single class")

    estimator = LogisticRegression(**(params or {}))
    estimator.fit(split.train[list(feature_columns)].astype(float), y)

    model = FittedModel(kind=INDICATOR, estimator=estimator, feature_columns=tuple(feature_columns))
    logger.info(f"Fit indicator model on {len(split.train)} rows ({int(y.sum())} with votes)")
    return model, split


@dataclass(frozen=True)
class TwoStageShareModel:
    """Indicator and magnitude sub-models used together to predict expected share"""
    magnitude: FittedModel
    indicator: FittedModel

    def predict(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Predict for standardized rows, including seasons never seen in training

        Args:
            df: Standardized player-seasons

        Returns:
            pandas.DataFrame: Identity columns plus VOTE_PROB, MAGNITUDE and
            EXPECTED_SHARE
        """
        id_columns = [c for c in cols.ID_COLUMNS if c in df.columns]
        predictions = df[id_columns].copy()
        predictions[cols.VOTE_PROBABILITY] = self.indicator.predict(df)
        predictions[cols.MAGNITUDE] = self.magnitude.predict(df)
        return combine_expected_share(predictions).reset_index(drop=True)

    @property
    def metrics(self) -> Dict[str, float]:
        return {**self.magnitude.metrics, **self.indicator.metrics}


def fit_two_stage_model(magnitude_cohort: pd.DataFrame, indicator_cohort: pd.DataFrame,
                        feature_columns: Sequence[str],
                        training_config: Optional[Dict[str, Any]] = None
                        ) -> Tuple[TwoStageShareModel, Dict[str, TrainingSplit]]:
    """
    Fit and evaluate both sub-models

    Args:
        magnitude_cohort: Standardized vote-getter rows
        indicator_cohort: Standardized rows with HAS_VOTE
        feature_columns: Predictor columns shared by both sub-models
        training_config: The 'training' section of the pipeline configuration

    Returns:
        Tuple of the fitted TwoStageShareModel (with evaluation metrics) and
        the partitions each sub-model was fit on, keyed by sub-model kind
    """
    training_config = training_config or {}
    test_size = training_config.get('test_size', DEFAULT_TEST_SIZE)
    margin = training_config.get('overfit_margin', 0.1)

    magnitude, magnitude_split = fit_magnitude_model(
        magnitude_cohort, feature_columns, test_size=test_size,
        random_state=training_config.get('magnitude_random_state', MAGNITUDE_RANDOM_STATE),
    )
    indicator, indicator_split = fit_indicator_model(
        indicator_cohort, feature_columns, test_size=test_size,
        random_state=training_config.get('indicator_random_state', INDICATOR_RANDOM_STATE),
        params=training_config.get('indicator_params'),
    )

    magnitude_metrics = evaluate_magnitude_model(magnitude, magnitude_split)
    indicator_metrics = evaluate_indicator_model(indicator, indicator_split)
    check_overfitting(magnitude_metrics, 'r2', margin)
    check_overfitting(indicator_metrics, 'roc_auc', margin)

    model = TwoStageShareModel(
        magnitude=replace(magnitude, metrics=magnitude_metrics),
        indicator=replace(indicator, metrics=indicator_metrics),
    )
    return model, {MAGNITUDE: magnitude_split, INDICATOR: indicator_split}
