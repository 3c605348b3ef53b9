# -*- coding: utf-8 -*-
"""
Persistence Module

This module saves pipeline outputs (player predictions, team totals,
experience scores) and the fitted model artifact.
"""

import os
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import joblib
import pandas as pd

logger = logging.getLogger(__name__)


def save_predictions(predictions_df, output_dir="output", season=None,
                     prefix="allnba_share_predictions") -> Tuple[str, str]:
    """
    Save predictions to CSV and JSON files

    Args:
        predictions_df: DataFrame of predictions
        output_dir: Directory to save files to
        season: Season the predictions are for (used in filenames)
        prefix: Prefix for the output filenames

    Returns:
        Tuple[str, str]: Paths to the saved CSV and JSON files

    Raises:
        RuntimeError: If predictions cannot be saved
    """
    try:
        os.makedirs(output_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        tag = f"{prefix}_{season}_{timestamp}" if season is not None else f"{prefix}_{timestamp}"

        csv_path = os.path.join(output_dir, f"{tag}.csv")
        json_path = os.path.join(output_dir, f"{tag}.json")

        predictions_df.to_csv(csv_path, index=False)
        logger.info(f"Saved predictions to {csv_path}")

        json_data = predictions_df.to_dict(orient="records")
        with open(json_path, "w") as f:
            json.dump(json_data, f, indent=2, default=str)
        logger.info(f"Saved predictions to {json_path}")

        return csv_path, json_path

    except OSError as e:
        logger.error(f"Failed to save predictions: {str(e)}")
        raise RuntimeError(f"Failed to save predictions: {str(e)}")


def save_table(df, output_dir="output", filename="table.csv") -> str:
    """
    Save a table to a CSV file with a header row

    Args:
        df: DataFrame to save
        output_dir: Directory to save file to
        filename: Name of the CSV file

    Returns:
        str: Path to the saved file

    Raises:
        RuntimeError: If the table cannot be saved
    """
    try:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, filename)
        df.to_csv(path, index=False)
        logger.info(f"Saved {len(df)} rows to {path}")
        return path
    except OSError as e:
        logger.error(f"Failed to save {filename}: {str(e)}")
        raise RuntimeError(f"Failed to save {filename}: {str(e)}")


def save_model(model, output_dir="models", name="allnba_share_model",
               metadata: Optional[Dict[str, Any]] = None) -> str:
    """
    Save a fitted two-stage model with joblib and a JSON metadata sidecar

    Args:
        model: TwoStageShareModel to save
        output_dir: Directory to save files to
        name: Base filename
        metadata: Extra metadata to record (seeds, season, etc.)

    Returns:
        str: Path to the saved model file

    Raises:
        RuntimeError: If the model cannot be saved
    """
    try:
        os.makedirs(output_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        model_path = os.path.join(output_dir, f"{name}_{timestamp}.pkl")
        metadata_path = os.path.join(output_dir, f"{name}_{timestamp}_metadata.json")

        full_metadata = {
            'model_name': name,
            'timestamp': timestamp,
            'file_path': model_path,
            'feature_columns': list(model.magnitude.feature_columns),
            'magnitude_coefficients': model.magnitude.coefficients.to_dict(),
            'magnitude_intercept': model.magnitude.intercept,
            'indicator_coefficients': model.indicator.coefficients.to_dict(),
            'indicator_intercept': model.indicator.intercept,
            'metrics': model.metrics,
        }
        if metadata:
            full_metadata.update(metadata)

        joblib.dump(model, model_path)
        with open(metadata_path, 'w') as f:
            json.dump(full_metadata, f, indent=2, default=str)

        logger.info(f"Saved model to {model_path}")
        return model_path

    except OSError as e:
        logger.error(f"Error saving model {name}: {str(e)}")
        raise RuntimeError(f"Failed to save model: {str(e)}")


def load_model(model_path):
    """
    Load a two-stage model saved by save_model

    Args:
        model_path: Path to the .pkl file

    Returns:
        TwoStageShareModel: The fitted model

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(model_path):
        raise FileNotFoundError(f"Model file not found: {model_path}")
    model = joblib.load(model_path)
    logger.info(f"Loaded model from {model_path}")
    return model


def load_saved_predictions(file_path) -> pd.DataFrame:
    """
    Load saved predictions from a file

    Args:
        file_path: Path to the predictions file (CSV or JSON)

    Returns:
        pandas.DataFrame: Loaded predictions

    Raises:
        ValueError: If the file format is not supported
    """
    file_extension = os.path.splitext(file_path)[1].lower()

    if file_extension == ".csv":
        return pd.read_csv(file_path)
    elif file_extension == ".json":
        with open(file_path, "r") as f:
            json_data = json.load(f)
        return pd.DataFrame(json_data)
    else:
        raise ValueError(f"Unsupported file format: {file_extension}")
