#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for the two-stage share model
"""

import os
import sys
import unittest
from dataclasses import FrozenInstanceError

import numpy as np
import pandas as pd

# Add project root to path if needed for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from allnba_share.config import columns as cols
from allnba_share.config.model_config import SHARE_OFFSET
from allnba_share.models.share_model import (
    transform_share,
    inverse_transform_share,
    split_training_rows,
    fit_magnitude_model,
    fit_indicator_model,
    fit_two_stage_model,
    TwoStageShareModel,
    MAGNITUDE,
    INDICATOR,
)
from allnba_share.models.evaluation import check_overfitting
from allnba_share.utils.errors import PipelineDataError, EmptyCohortError

FEATURES = ["X1", "X2"]


def _sigmoid(values):
    return 1.0 / (1.0 + np.exp(-values))


def _magnitude_cohort(n=40, seed=0):
    """Vote-getters whose transformed share is exactly 0.5 + 1.2 * X1 - 0.7 * X2"""
    rng = np.random.RandomState(seed)
    x1 = rng.normal(size=n)
    x2 = rng.normal(size=n)
    response = 0.5 + 1.2 * x1 - 0.7 * x2
    return pd.DataFrame({
        cols.PLAYER_ID: np.arange(n),
        cols.SEASON: 2020 + np.arange(n) % 2,
        "X1": x1,
        "X2": x2,
        cols.SHARE: SHARE_OFFSET + _sigmoid(response),
    })


def _indicator_cohort(n=80, seed=1):
    rng = np.random.RandomState(seed)
    x1 = rng.normal(size=n)
    x2 = rng.normal(size=n)
    has_vote = (x1 + 0.5 * rng.normal(size=n) > 0.8).astype(int)
    return pd.DataFrame({
        cols.PLAYER_ID: np.arange(n),
        cols.SEASON: 2020 + np.arange(n) % 2,
        "X1": x1,
        "X2": x2,
        cols.SHARE: np.where(has_vote == 1, 0.3, 0.0),
        cols.HAS_VOTE: has_vote,
    })


class TestShareTransform(unittest.TestCase):
    """Test case for the log-odds response transform"""

    def test_forward_then_inverse_recovers_share_less_offset(self):
        shares = np.linspace(1.0 / 500, 1.0, 50)
        recovered = inverse_transform_share(transform_share(shares))
        np.testing.assert_allclose(recovered, shares - SHARE_OFFSET, atol=1e-12)

    def test_forward_is_finite_over_share_range(self):
        values = transform_share([1.0 / 500, 0.5, 1.0])
        self.assertTrue(np.all(np.isfinite(values)))

    def test_forward_rejects_out_of_range(self):
        for bad in (0.0, SHARE_OFFSET, 1.0 + SHARE_OFFSET, 2.0):
            with self.assertRaises(ValueError):
                transform_share([bad])

    def test_inverse_maps_into_unit_interval(self):
        values = inverse_transform_share([-1000.0, -5.0, 0.0, 5.0, 1000.0])
        self.assertTrue(np.all((values >= 0) & (values <= 1)))
        self.assertAlmostEqual(values[2], 0.5)
        self.assertAlmostEqual(values[3], np.exp(5.0) / (1 + np.exp(5.0)))


class TestTrainingSplit(unittest.TestCase):
    """Test case for the seeded train/test partition"""

    def test_disjoint_and_covering(self):
        cohort = _magnitude_cohort()
        split = split_training_rows(cohort, test_size=0.25, random_state=42)
        train_ids = set(split.train[cols.PLAYER_ID])
        test_ids = set(split.test[cols.PLAYER_ID])
        self.assertFalse(train_ids & test_ids)
        self.assertEqual(train_ids | test_ids, set(cohort[cols.PLAYER_ID]))
        self.assertEqual(len(split), len(cohort))

    def test_fixed_seed_is_reproducible(self):
        cohort = _magnitude_cohort()
        first = split_training_rows(cohort, random_state=42)
        second = split_training_rows(cohort, random_state=42)
        self.assertEqual(first.train.index.tolist(), second.train.index.tolist())

    def test_stratified_split_keeps_both_classes(self):
        cohort = _indicator_cohort()
        split = split_training_rows(cohort, random_state=7, stratify_column=cols.HAS_VOTE)
        self.assertEqual(split.train[cols.HAS_VOTE].nunique(), 2)
        self.assertEqual(split.test[cols.HAS_VOTE].nunique(), 2)

    def test_too_few_rows(self):
        with self.assertRaises(EmptyCohortError):
            split_training_rows(_magnitude_cohort().iloc[:1])


class TestMagnitudeModel(unittest.TestCase):
    """Test case for the magnitude sub-model"""

    def test_recovers_least_squares_solution(self):
        cohort = _magnitude_cohort()
        model, split = fit_magnitude_model(cohort, FEATURES, test_size=0.25, random_state=42)

        design = np.column_stack([np.ones(len(split.train)), split.train[FEATURES].to_numpy()])
        solution, *_ = np.linalg.lstsq(design, transform_share(split.train[cols.SHARE]), rcond=None)

        self.assertAlmostEqual(model.intercept, solution[0], places=6)
        np.testing.assert_allclose(model.coefficients.to_numpy(), solution[1:], atol=1e-6)
        np.testing.assert_allclose(model.coefficients.to_numpy(), [1.2, -0.7], atol=1e-6)
        self.assertEqual(model.coefficients.index.tolist(), FEATURES)

    def test_predictions_are_shares(self):
        cohort = _magnitude_cohort()
        model, split = fit_magnitude_model(cohort, FEATURES)
        predicted = model.predict(split.test)
        np.testing.assert_allclose(predicted, split.test[cols.SHARE] - SHARE_OFFSET, atol=1e-6)

    def test_rejects_zero_share_rows(self):
        cohort = _magnitude_cohort()
        cohort.loc[0, cols.SHARE] = 0.0
        with self.assertRaises(PipelineDataError):
            fit_magnitude_model(cohort, FEATURES)

    def test_missing_predictor_column(self):
        model, _ = fit_magnitude_model(_magnitude_cohort(), FEATURES)
        with self.assertRaises(ValueError):
            model.predict(_magnitude_cohort().drop(columns=["X2"]))

    def test_fitted_model_is_immutable(self):
        model, _ = fit_magnitude_model(_magnitude_cohort(), FEATURES)
        with self.assertRaises(FrozenInstanceError):
            model.feature_columns = ("X1",)


class TestIndicatorModel(unittest.TestCase):
    """Test case for the indicator sub-model"""

    def test_probabilities(self):
        model, split = fit_indicator_model(_indicator_cohort(), FEATURES, random_state=7,
                                           params={'max_iter': 1000})
        probabilities = model.predict(split.test)
        self.assertTrue(np.all((probabilities >= 0) & (probabilities <= 1)))
        self.assertGreater(model.coefficients["X1"], 0)

    def test_single_class_rejected(self):
        cohort = _indicator_cohort().assign(**{cols.HAS_VOTE: 0})
        with self.assertRaises(PipelineDataError):
            fit_indicator_model(cohort, FEATURES)


class TestTwoStageModel(unittest.TestCase):
    """Test case for the combined model"""

    def setUp(self):
        self.model, self.splits = fit_two_stage_model(
            _magnitude_cohort(), _indicator_cohort(), FEATURES,
            {'test_size': 0.25, 'magnitude_random_state': 42, 'indicator_random_state': 7},
        )

    def test_metrics_reported(self):
        metrics = self.model.metrics
        for key in ('train_r2', 'test_r2', 'train_roc_auc', 'test_roc_auc'):
            self.assertIn(key, metrics)
        self.assertGreater(metrics['test_r2'], 0.99)
        self.assertGreater(metrics['test_roc_auc'], 0.5)
        self.assertEqual(set(self.splits), {MAGNITUDE, INDICATOR})

    def test_predict_rows(self):
        unseen = _indicator_cohort(n=10, seed=5).assign(**{cols.SEASON: 2030})
        predictions = self.model.predict(unseen)
        self.assertEqual(len(predictions), 10)
        for column in (cols.PLAYER_ID, cols.SEASON, cols.VOTE_PROBABILITY,
                       cols.MAGNITUDE, cols.EXPECTED_SHARE):
            self.assertIn(column, predictions.columns)
        np.testing.assert_allclose(
            predictions[cols.EXPECTED_SHARE],
            predictions[cols.VOTE_PROBABILITY] * predictions[cols.MAGNITUDE],
        )
        self.assertTrue((predictions[cols.SEASON] == 2030).all())

    def test_prediction_does_not_refit(self):
        before = self.model.magnitude.coefficients.copy()
        unseen = _indicator_cohort(n=10, seed=5)
        first = self.model.predict(unseen)
        second = self.model.predict(unseen)
        pd.testing.assert_frame_equal(first, second)
        pd.testing.assert_series_equal(before, self.model.magnitude.coefficients)

    def test_is_two_stage_model(self):
        self.assertIsInstance(self.model, TwoStageShareModel)


class TestOverfittingCheck(unittest.TestCase):

    def test_flags_large_gap(self):
        self.assertTrue(check_overfitting({'train_r2': 0.9, 'test_r2': 0.5}, 'r2', 0.1))
        self.assertFalse(check_overfitting({'train_r2': 0.6, 'test_r2': 0.65}, 'r2', 0.1))
        self.assertFalse(check_overfitting({'train_r2': float('nan'), 'test_r2': 0.5}, 'r2'))


if __name__ == '__main__':
    unittest.main()
