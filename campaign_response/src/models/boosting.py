"""Gradient-boosted response classifier tuned by cross-validated grid search.

The grid covers boosting rounds, learning rate and tree depth; every other
tree parameter is fixed by :class:`~campaign_response.src.utils.config.BoostingConfig`.
Grid points are ranked by ROC AUC computed from per-fold class probabilities,
and the best combination is refit on the full training split.

Labels are mapped to ``1 = positive label`` before fitting, so
``predict_proba(...)[:, 1]`` is always the probability of the positive class
regardless of how the label strings sort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from sklearn.ensemble import GradientBoostingClassifier
from sklearn.model_selection import GridSearchCV, StratifiedKFold

from campaign_response.src.data.preprocess import POSITIVE_LABEL
from campaign_response.src.utils.config import BoostingConfig

logger = logging.getLogger(__name__)


def encode_labels(labels: pd.Series, positive_label: str = POSITIVE_LABEL) -> pd.Series:
    """Map labels to 1 (positive) / 0 (anything else)."""
    return (labels.astype(str) == str(positive_label)).astype(int).rename(labels.name)


@dataclass
class TunedBoostingModel:
    """A fitted ensemble together with its grid-search record."""

    estimator: GradientBoostingClassifier
    best_params: Dict[str, Any]
    best_score: float
    cv_results: pd.DataFrame
    feature_names: List[str]
    positive_label: str = POSITIVE_LABEL

    def predict_positive_proba(self, features: pd.DataFrame) -> pd.Series:
        """Probability of the positive label for each row of ``features``."""
        missing = [c for c in self.feature_names if c not in features.columns]
        if missing:
            raise KeyError(f"Features missing columns seen during training: {missing}")
        x = features[self.feature_names]
        pos_idx = int(np.flatnonzero(self.estimator.classes_ == 1)[0])
        proba = self.estimator.predict_proba(x)[:, pos_idx]
        return pd.Series(proba, index=features.index, name=f"P_{self.positive_label}")

    def feature_importance(self) -> pd.Series:
        """Impurity-based importance, highest first."""
        imp = pd.Series(self.estimator.feature_importances_, index=self.feature_names, name="importance")
        return imp.sort_values(ascending=False)


def _tidy_cv_results(search: GridSearchCV) -> pd.DataFrame:
    res = pd.DataFrame(search.cv_results_)
    keep = [c for c in res.columns if c.startswith("param_")] + [
        "mean_test_score",
        "std_test_score",
        "rank_test_score",
        "mean_fit_time",
    ]
    out = res[keep].rename(columns=lambda c: c.replace("param_", ""))
    for col in ("n_estimators", "max_depth"):
        if col in out.columns:
            out[col] = out[col].astype(int)
    if "learning_rate" in out.columns:
        out["learning_rate"] = out["learning_rate"].astype(float)
    return out.sort_values("rank_test_score").reset_index(drop=True)


def fit_boosted_classifier(
    features: pd.DataFrame,
    labels: pd.Series,
    config: Optional[BoostingConfig] = None,
    random_state: int = 42,
    positive_label: str = POSITIVE_LABEL,
) -> TunedBoostingModel:
    """Grid-search a :class:`~sklearn.ensemble.GradientBoostingClassifier`.

    Parameters
    ----------
    features:
        Encoded numeric training matrix.
    labels:
        Response labels; ``positive_label`` marks the positive class.
    config:
        Grid, fixed parameters and CV setup.
    random_state:
        Seed for the folds and the trees.
    """
    config = config or BoostingConfig()
    y = encode_labels(labels, positive_label)
    if y.nunique() < 2:
        raise ValueError("Training labels contain a single class; cannot fit a classifier.")

    base = GradientBoostingClassifier(
        subsample=config.subsample,
        min_samples_leaf=config.min_samples_leaf,
        random_state=random_state,
    )
    cv = StratifiedKFold(n_splits=config.cv_folds, shuffle=True, random_state=random_state)
    search = GridSearchCV(
        base,
        param_grid=config.param_grid(),
        scoring=config.scoring,
        cv=cv,
        n_jobs=config.n_jobs,
        refit=True,
    )

    grid_size = int(np.prod([len(v) for v in config.param_grid().values()]))
    logger.info(
        "Grid search over %d combinations x %d folds (%s)",
        grid_size,
        config.cv_folds,
        config.scoring,
    )
    search.fit(features, y)

    logger.info("Best params: %s | CV %s=%.4f", search.best_params_, config.scoring, search.best_score_)
    return TunedBoostingModel(
        estimator=search.best_estimator_,
        best_params=dict(search.best_params_),
        best_score=float(search.best_score_),
        cv_results=_tidy_cv_results(search),
        feature_names=list(features.columns),
        positive_label=positive_label,
    )


__all__ = ["TunedBoostingModel", "encode_labels", "fit_boosted_classifier"]
