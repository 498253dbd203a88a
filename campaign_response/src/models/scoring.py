"""Holdout scoring: encoded holdout features plus one probability column."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from campaign_response.src.data.features import EncodingSchema, align_to_schema

from .boosting import TunedBoostingModel

logger = logging.getLogger(__name__)

PROBABILITY_COLUMN = "Predicted_Response_Prob"


def score_holdout(
    model: TunedBoostingModel,
    holdout_features: pd.DataFrame,
    schema: EncodingSchema,
    probability_col: str = PROBABILITY_COLUMN,
) -> pd.DataFrame:
    """Append the positive-class probability to the encoded holdout.

    ``holdout_features`` is re-aligned to ``schema`` first, so a frame that
    still lacks a training-only indicator column is zero-filled here as well.
    """
    aligned, filled = align_to_schema(holdout_features, schema)
    if filled:
        logger.info("Zero-filled %d column(s) before scoring: %s", len(filled), filled)

    scored = aligned.copy()
    scored[probability_col] = model.predict_positive_proba(aligned).to_numpy()
    return scored


def write_scored_holdout(scored: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write the scored holdout as CSV with a header row and no index."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    scored.to_csv(out_path, index=False)
    logger.info("Wrote %d scored holdout rows to %s", len(scored), out_path)
    return out_path


__all__ = ["PROBABILITY_COLUMN", "score_holdout", "write_scored_holdout"]
