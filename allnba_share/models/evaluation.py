# -*- coding: utf-8 -*-

"""
Model Evaluation Module

Responsibilities:
- R² of predicted vs actual share for the magnitude sub-model
- ROC-AUC of vote probability for the indicator sub-model
- Flagging a held-out score that trails the training score (overfitting)
- An optional predicted-vs-actual figure for the magnitude sub-model
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import pandas as pd
from sklearn.metrics import r2_score, roc_auc_score

from ..config import columns as cols

logger = logging.getLogger(__name__)


def _r2(model: Any, df) -> float:
    if len(df) < 2:
        logger.warning(f"R² is undefined for {len(df)} rows")
        return float("nan")
    return float(r2_score(df[cols.SHARE], model.predict(df)))


def _roc_auc(model: Any, df) -> float:
    try:
        return float(roc_auc_score(df[cols.HAS_VOTE].astype(int), model.predict(df)))
    except ValueError as e:
        logger.warning(f"Could not calculate ROC AUC: {str(e)}")
        return float("nan")


def evaluate_magnitude_model(model: Any, split: Any) -> Dict[str, float]:
    """
    Score the magnitude sub-model on the share scale

    Args:
        model: Fitted magnitude model
        split: The TrainingSplit the model was fit on

    Returns:
        Dict with 'train_r2' and 'test_r2'
    """
    metrics = {
        'train_r2': _r2(model, split.train),
        'test_r2': _r2(model, split.test),
    }
    logger.info(f"Magnitude model R²: train={metrics['train_r2']:.3f}, test={metrics['test_r2']:.3f}")
    return metrics


def evaluate_indicator_model(model: Any, split: Any) -> Dict[str, float]:
    """
    Score the indicator sub-model by ROC-AUC

    Args:
        model: Fitted indicator model
        split: The TrainingSplit the model was fit on

    Returns:
        Dict with 'train_roc_auc' and 'test_roc_auc'
    """
    metrics = {
        'train_roc_auc': _roc_auc(model, split.train),
        'test_roc_auc': _roc_auc(model, split.test),
    }
    logger.info(f"Indicator model ROC-AUC: train={metrics['train_roc_auc']:.3f}, "
                f"test={metrics['test_roc_auc']:.3f}")
    return metrics


def check_overfitting(metrics: Dict[str, float], metric: str, margin: float = 0.1) -> bool:
    """
    Flag a held-out score that trails the training score by more than margin

    Args:
        metrics: Output of one of the evaluate functions
        metric: Metric suffix ('r2' or 'roc_auc')
        margin: Allowed shortfall

    Returns:
        bool: True if the model looks overfit
    """
    train = metrics.get(f'train_{metric}', float("nan"))
    test = metrics.get(f'test_{metric}', float("nan"))
    if np.isnan(train) or np.isnan(test):
        return False
    if train - test > margin:
        logger.warning(f"Possible overfitting: train {metric}={train:.3f}, test {metric}={test:.3f}")
        return True
    return False


def plot_magnitude_fit(model: Any, split: Any, output_path: Union[str, Path]) -> Path:
    """
    Save a scatter of predicted vs actual share for both partitions

    Args:
        model: Fitted magnitude model
        split: The TrainingSplit the model was fit on
        output_path: PNG file to write

    Returns:
        Path: The written figure
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    import seaborn as sns

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    points = pd.concat([
        pd.DataFrame({'actual': df[cols.SHARE].to_numpy(),
                      'predicted': model.predict(df),
                      'partition': label})
        for label, df in (("train", split.train), ("test", split.test))
    ], ignore_index=True)

    sns.set(style="whitegrid")
    fig, ax = plt.subplots(figsize=(6, 6))
    sns.scatterplot(x='actual', y='predicted', hue='partition', data=points, alpha=0.7, ax=ax)
    ax.plot([0, 1], [0, 1], color="grey", linestyle="--", linewidth=1)
    ax.set_xlabel("Actual share")
    ax.set_ylabel("Predicted share")
    ax.set_title("Magnitude model: predicted vs actual")
    ax.legend()
    fig.tight_layout()
    fig.savefig(output_path)
    plt.close(fig)

    logger.info(f"Saved magnitude fit plot to {output_path}")
    return output_path
