"""SHAP attributions for the fitted boosted ensemble.

Attributions are computed with :class:`shap.TreeExplainer` on the training
feature matrix and are expressed for the positive class (log-odds scale for
:class:`~sklearn.ensemble.GradientBoostingClassifier`). Features are ranked by
mean absolute attribution; the top-ranked ones drive the dependence plots in
:mod:`campaign_response.src.visualization.plots_model`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List

import numpy as np
import pandas as pd
import shap

from campaign_response.src.models.boosting import TunedBoostingModel

logger = logging.getLogger(__name__)


@dataclass
class ShapAnalysis:
    """Per-record, per-feature attributions and their global ranking."""

    values: pd.DataFrame
    data: pd.DataFrame
    base_value: float
    importance: pd.Series

    def top_features(self, k: int = 4) -> List[str]:
        return list(self.importance.index[: int(k)])


def _positive_class(values: Any, n_features: int) -> np.ndarray:
    """Reduce the explainer output to a (n_samples, n_features) array.

    Depending on the shap version, binary classifiers yield a 2D array, a list
    of per-class arrays, or a 3D array with a trailing class axis.
    """
    if isinstance(values, list):
        values = values[-1]
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 3:
        arr = arr[:, :, -1]
    if arr.ndim != 2 or arr.shape[1] != n_features:
        raise ValueError(f"Unexpected SHAP value shape {arr.shape} for {n_features} features.")
    return arr


def _scalar_base(expected: Any) -> float:
    arr = np.asarray(expected, dtype=float).reshape(-1)
    return float(arr[-1])


def rank_by_mean_abs(values: pd.DataFrame) -> pd.Series:
    """Mean |SHAP| per feature, highest first."""
    return values.abs().mean(axis=0).sort_values(ascending=False, kind="mergesort").rename("mean_abs_shap")


def compute_shap_values(model: TunedBoostingModel, features: pd.DataFrame) -> ShapAnalysis:
    """Explain ``model`` on ``features`` (normally the training matrix)."""
    data = features[model.feature_names].astype(float)
    explainer = shap.TreeExplainer(model.estimator)
    raw = explainer.shap_values(data)

    values = pd.DataFrame(
        _positive_class(raw, n_features=data.shape[1]),
        index=data.index,
        columns=model.feature_names,
    )
    importance = rank_by_mean_abs(values)
    logger.info(
        "SHAP attributions for %d rows; top features: %s",
        len(values),
        list(importance.index[:5]),
    )
    return ShapAnalysis(
        values=values,
        data=data,
        base_value=_scalar_base(explainer.expected_value),
        importance=importance,
    )


__all__ = ["ShapAnalysis", "compute_shap_values", "rank_by_mean_abs"]
